"""Response formatting utilities."""

from datetime import UTC, datetime


def format_utc_datetime(dt: datetime | None) -> str | None:
    """Format a naive UTC datetime as an ISO string with a Z suffix.

    Timestamps are stored as naive UTC (``datetime.utcnow()``); the suffix
    lets browsers parse them as UTC.

    Args:
        dt: datetime object (assumed UTC) or None

    Returns:
        ISO format string (e.g., "2026-01-10T10:30:00Z") or None
    """
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(UTC).replace(tzinfo=None)
    return f"{dt.isoformat()}Z"
