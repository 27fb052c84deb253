from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def require_date_range(start: date, end: date) -> None:
    if start > end:
        raise ValidationError("startDate must not be after endDate")


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day of the closed range [start, end]."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)
