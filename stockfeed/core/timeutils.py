from datetime import datetime, timedelta, timezone
from typing import Optional

EPOCH = datetime(1970, 1, 1)


def epoch_to_utc(seconds: int) -> datetime:
    """Epoch seconds -> naive UTC datetime, the form timestamps are stored in."""
    return EPOCH + timedelta(seconds=seconds)


def to_utc_naive(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utc_now() -> datetime:
    """Current time as naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
