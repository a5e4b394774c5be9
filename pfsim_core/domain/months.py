from __future__ import annotations

import datetime as dt
from typing import Optional, Tuple

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def parse_ym(value: str) -> Tuple[int, int]:
    """Parse "YYYY-MM" into (year, month) with a 1-based month."""
    year, month = (int(part) for part in value.split("-")[:2])
    return year, month


def to_abs_month(year: int, month: int) -> int:
    return year * 12 + (month - 1)


def parse_abs_month(value: str) -> int:
    return to_abs_month(*parse_ym(value))


def abs_month_to_ym(abs_month: int) -> str:
    year, month_idx = divmod(abs_month, 12)
    return f"{year:04d}-{month_idx + 1:02d}"


def year_label(abs_month: int) -> str:
    return str(abs_month // 12)


def current_month(today: Optional[dt.date] = None) -> str:
    today = today or dt.date.today()
    return f"{today.year:04d}-{today.month:02d}"


def format_month(value: str) -> str:
    """"2025-01" -> "Jan 2025"."""
    year, month = parse_ym(value)
    return f"{MONTH_ABBREVIATIONS[month - 1]} {year}"


def add_months(value: str, months: int) -> str:
    return abs_month_to_ym(parse_abs_month(value) + months)
