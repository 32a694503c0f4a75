from datetime import datetime, timezone


def now() -> datetime:
    """Current UTC time without tzinfo (naive).
    This is the clock used for every stored timestamp.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def now_tzinfo() -> datetime:
    return datetime.now(timezone.utc)


async def to_utc_naive(dt: datetime | None) -> datetime | None:
    """Convert a datetime (aware or naive) to naive UTC.
    - None -> None
    - aware -> converted to UTC, tzinfo dropped
    - naive -> assumed to be UTC already
    """
    if dt is None:
        return None

    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)

    return dt


def parse_hhmm(value: str) -> int:
    """'HH:MM' -> minutes since midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)
