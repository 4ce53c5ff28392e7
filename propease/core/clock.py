from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from propease.core.config import get_settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _zone() -> ZoneInfo:
    return ZoneInfo(get_settings().timezone)


def today() -> date:
    """Calendar date in the office timezone; all due/overdue checks use it."""
    return datetime.now(_zone()).date()


def local_stamp(dt: datetime) -> str:
    # SQLite hands timestamps back naive; they were written as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(_zone()).strftime("%d/%m/%Y, %H:%M:%S")


def iso(value) -> str | None:
    return value.isoformat() if value else None


def local_day_bounds(day: date) -> tuple[datetime, datetime]:
    """[start, end) of a local calendar day, expressed in UTC."""
    start = datetime.combine(day, time.min, tzinfo=_zone())
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def from_local(naive: datetime) -> datetime:
    """Interpret a naive wall-clock time in the office timezone, return UTC."""
    return naive.replace(tzinfo=_zone()).astimezone(timezone.utc)
