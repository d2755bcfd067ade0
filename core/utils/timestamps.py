"""
Timestamp parsing for source feeds

Feeds mix ISO-8601 ("2024-01-01T13:00:00Z", "2024-01-01T13:00:00-07:00")
and space-separated ("2024-01-01 13:00") forms. Naive values are UTC.
"""

from datetime import UTC, datetime


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """
    Parse a feed timestamp into an aware UTC datetime

    Args:
        value: Timestamp string or datetime

    Returns:
        UTC datetime, or None if the value cannot be parsed

    Example:
        >>> parse_timestamp("2024-01-01 13:00")
        datetime.datetime(2024, 1, 1, 13, 0, tzinfo=datetime.timezone.utc)
        >>> parse_timestamp("not a date") is None
        True
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if "T" not in text and " " in text:
            text = text.replace(" ", "T", 1)
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def floor_to_hour(moment: datetime) -> datetime:
    """Truncate to the start of the hour"""
    return moment.replace(minute=0, second=0, microsecond=0)


def ensure_utc(moment: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones"""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def utc_now() -> datetime:
    return datetime.now(UTC)
