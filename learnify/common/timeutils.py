from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in MongoDB"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def to_rfc3339(value: Optional[datetime]) -> str:
    if value is None:
        return "0001-01-01T00:00:00Z"
    return _as_naive_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")


def _plural(count: int, unit: str) -> str:
    if count <= 1:
        return f"1 {unit} ago"
    return f"{count} {unit}s ago"


def format_relative(value: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Human friendly age of a timestamp

    "Recently" when unknown, "Just now" under a minute, then minutes, hours,
    days and weeks. Anything older than 30 days is shown as a date.
    """
    if value is None:
        return "Recently"
    value = _as_naive_utc(value)
    now = _as_naive_utc(now) if now is not None else utcnow()

    seconds = (now - value).total_seconds()
    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return _plural(int(seconds // 60), "minute")
    if seconds < 86400:
        return _plural(int(seconds // 3600), "hour")
    if seconds < 7 * 86400:
        return _plural(int(seconds // 86400), "day")
    if seconds < 30 * 86400:
        return _plural(int(seconds // (7 * 86400)), "week")
    return f"{value.strftime('%b')} {value.day}, {value.year}"
