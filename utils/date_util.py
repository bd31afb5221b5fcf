from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from models.timer import Timer

# Format produced by <input type="datetime-local"> in the creation form
LOCAL_DATETIME_FORMAT = "%Y-%m-%dT%H:%M"

NANOSECONDS_PER_MICROSECOND = 1_000


def local_now() -> datetime:
    """Current time as an aware datetime in the server's local time zone."""
    return datetime.now().astimezone()


def nanoseconds_to_timedelta(nanoseconds: int) -> timedelta:
    """
    Convert a nanosecond count to a timedelta.

    timedelta only resolves microseconds, so sub-microsecond remainders are dropped.
    """
    return timedelta(microseconds=nanoseconds // NANOSECONDS_PER_MICROSECOND)


def next_due(timer: "Timer", now: datetime) -> datetime:
    """
    Compute when a timer is next due.

    A timer that was never completed is always one full period away from `now`;
    otherwise the due date is anchored to the last completion and `now` is ignored.

    Args:
        timer: The timer to evaluate
        now: Reference point used only for never-completed timers

    Returns:
        The next due datetime, capped at the last representable instant
    """
    anchor = now if timer.last_completed is None else timer.last_completed
    try:
        return anchor + timer.frequency
    except OverflowError:
        return datetime.max.replace(tzinfo=anchor.tzinfo)


def parse_local_datetime(value: str) -> datetime:
    """
    Parse a form value like "2025-01-01T00:00" as local wall-clock time.

    Raises:
        ValueError: If the value does not match LOCAL_DATETIME_FORMAT
    """
    naive = datetime.strptime(value, LOCAL_DATETIME_FORMAT)
    return naive.astimezone()


def format_timestamp(value: Optional[datetime]) -> str:
    """
    Serialize a timestamp for storage.

    Returns:
        ISO 8601 string with UTC offset, or "" for a timer that was never completed
    """
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat()


def parse_timestamp(value: str) -> Optional[datetime]:
    """
    Inverse of format_timestamp. An empty string means "never completed".

    Raises:
        ValueError: If a non-empty value is not an ISO 8601 datetime
    """
    if value == "":
        return None
    # fromisoformat does not accept a trailing "Z" before Python 3.11
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def rfc3339(value: datetime) -> str:
    """Second-precision RFC 3339 string, as consumed by the client-side date formatting."""
    return value.isoformat(timespec="seconds")
