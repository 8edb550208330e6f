"""Date manipulation utilities"""

from datetime import date
from typing import Tuple, Union


def parse_day(value: Union[date, str]) -> date:
    """Accept a date or a YYYY-MM-DD string"""
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def full_day_range(start: Union[date, str], end: Union[date, str]) -> Tuple[str, str]:
    """
    Convert two calendar days into inclusive UTC timestamps.

    Example:
        2026-01-19, 2026-01-25 →
        ("2026-01-19T00:00:00.000Z", "2026-01-25T23:59:59.999Z")
    """
    start_day = parse_day(start)
    end_day = parse_day(end)
    if start_day > end_day:
        raise ValueError(f"Start date {start_day} is after end date {end_day}")
    return f"{start_day.isoformat()}T00:00:00.000Z", f"{end_day.isoformat()}T23:59:59.999Z"
