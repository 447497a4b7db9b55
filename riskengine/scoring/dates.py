from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

ISO_DATE_FORMAT = "%Y-%m-%d"


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse ``YYYY-MM-DD`` (or the date part of an ISO timestamp)."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip().split("T", 1)[0]
    try:
        return datetime.strptime(text, ISO_DATE_FORMAT).date()
    except ValueError:
        return None


def add_months(start: Optional[str], months: int) -> str:
    """Add calendar months to an ISO date, returning ``""`` when undefined.

    The day of month is kept; a day that does not exist in the target month
    rolls over into the next one (2024-08-31 + 6 months is 2025-03-03), the
    same date the form preview shows.
    """
    if months == 0:
        return ""
    base = parse_iso_date(start)
    if base is None:
        return ""

    month_index = base.month - 1 + months
    year = base.year + month_index // 12
    month = month_index % 12 + 1
    try:
        first = date(year, month, 1)
        target = first + timedelta(days=base.day - 1)
    except (ValueError, OverflowError):
        return ""
    return target.strftime(ISO_DATE_FORMAT)
