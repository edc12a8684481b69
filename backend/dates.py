from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo


def _local_date(tz: str | None = None) -> date:
    if tz:
        return datetime.now(ZoneInfo(tz)).date()
    return date.today()


def today(tz: str | None = None) -> str:
    """ISO date key for the current local day."""
    return _local_date(tz).isoformat()


def last_n_dates(n: int = 7, tz: str | None = None, end: date | None = None) -> list[str]:
    """The ``n`` days ending at ``end`` (default today), oldest first."""
    if n < 1:
        raise ValueError("n must be at least 1")
    last = end or _local_date(tz)
    return [(last - timedelta(days=offset)).isoformat() for offset in range(n - 1, -1, -1)]


def parse_day(value: str) -> str:
    """Validate an ISO date key and return it in canonical form."""
    return date.fromisoformat(str(value).strip()).isoformat()
