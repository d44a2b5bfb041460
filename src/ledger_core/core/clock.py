"""Injectable clock.

Every timestamp the engine writes (``createdAt``, ``lastUpdated``, claim and
quality-check identifiers, check dates) is read through a clock so tests can
pin or advance time.
"""

from collections.abc import Callable
from datetime import datetime, timezone

from beartype import beartype

Clock = Callable[[], datetime]


@beartype
def utc_now() -> datetime:
    """System clock in UTC."""
    return datetime.now(timezone.utc)


@beartype
def epoch_millis(moment: datetime) -> int:
    """Milliseconds since the Unix epoch for an aware datetime."""
    return int(moment.timestamp() * 1000)
