from __future__ import annotations

import os
import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{function} - {message}"


def configure_logging(level: Optional[str] = None) -> None:
    """Route loguru output to stderr at the given level (env PFSIM_LOG_LEVEL, default WARNING)."""
    level = (level or os.environ.get("PFSIM_LOG_LEVEL") or "WARNING").upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
