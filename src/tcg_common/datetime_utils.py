"""UTC time helpers: rolling windows and ISO rendering for API payloads."""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def days_ago(days: int, now: datetime | None = None) -> datetime:
    """Start of a rolling window of ``days`` ending at ``now``.

    Telemetry counts use this for their 7-day window.
    """
    return (now or utc_now()) - timedelta(days=days)


def isoformat_or_none(value: datetime | None) -> str | None:
    """Render a timestamp for JSON; naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()
