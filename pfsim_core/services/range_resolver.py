from __future__ import annotations

import datetime as dt
from typing import Iterable, Optional, Tuple

from loguru import logger

from pfsim_core.domain.models import CashFlow
from pfsim_core.domain.months import parse_abs_month, to_abs_month

DEFAULT_HORIZON_MONTHS = 30 * 12
ONE_OFF_AFTERMATH_MONTHS = 12


def resolve_range(
    cash_flows: Iterable[CashFlow],
    end_override: Optional[str] = None,
    today: Optional[dt.date] = None,
) -> Tuple[int, int]:
    """
    Absolute (start, end) months to simulate:
    - start is the current month, pulled back to the earliest flow start.
    - end is 30 years from now, pushed out to the latest recurring end date
      and to one year past the latest one-off event.
    - end_override replaces the computed end unconditionally.
    The caller treats end <= start as an empty simulation.
    """
    today = today or dt.date.today()
    current_abs = to_abs_month(today.year, today.month)
    flows = list(cash_flows)

    start_abs = min([current_abs] + [cf.start_abs for cf in flows])
    end_abs = current_abs + DEFAULT_HORIZON_MONTHS

    ends = [cf.end_abs for cf in flows if cf.end_abs is not None]
    if ends:
        end_abs = max(end_abs, max(ends))

    one_offs = [cf.start_abs for cf in flows if cf.is_one_off]
    if one_offs:
        end_abs = max(end_abs, max(one_offs) + ONE_OFF_AFTERMATH_MONTHS)

    if end_override:
        end_abs = parse_abs_month(end_override)

    logger.debug("Resolved simulation range {}..{} ({} months)", start_abs, end_abs, end_abs - start_abs)
    return start_abs, end_abs
