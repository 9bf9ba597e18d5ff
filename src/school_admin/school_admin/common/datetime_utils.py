from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Union


def parse_iso_date(value: Union[str, date]) -> date:
    """Parse YYYY-MM-DD string into date.

    The API may send full timestamps for date columns, only the date part is kept.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def hhmm(value: datetime) -> str:
    return value.strftime("%H:%M")


def default_session_window(now: datetime, *, minutes: int) -> tuple[str, str]:
    """Start/end times for a freshly created session: now and now + `minutes`."""
    return hhmm(now), hhmm(now + timedelta(minutes=minutes))
