from datetime import datetime, timezone


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; pin every timestamp to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
