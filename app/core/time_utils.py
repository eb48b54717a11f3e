from datetime import datetime, timezone


def utc_now() -> datetime:
    # Mongo hands back naive UTC datetimes, so compare against the same
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
