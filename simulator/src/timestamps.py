"""
Clock access and conversion to the protocol timestamp representation.

Profiles carry an XML ``dateTime`` timestamp. In Python that is a
timezone-aware UTC :class:`datetime` with millisecond precision, which
pydantic serializes to ISO 8601.

The current instant is read through a :data:`TimeSource`, a zero-argument
callable returning epoch milliseconds. Builders accept one as a keyword so
tests can substitute a fixed clock for the system clock.

CHANGELOG:
- 2026-10-19: Initial creation (STORY-002)

TODO:
- None
"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

TimeSource = Callable[[], int]
"""Zero-argument callable returning the current instant in epoch milliseconds."""

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class TimeConversionError(ValueError):
    """Raised when a clock reading cannot be expressed as a protocol timestamp."""


def system_clock() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def xml_time_for(millis: int) -> datetime:
    """Convert epoch milliseconds into a UTC protocol timestamp.

    Args:
        millis: Milliseconds since 1970-01-01T00:00:00Z. Negative values are
            instants before the epoch.

    Returns:
        A timezone-aware UTC datetime with millisecond precision.

    Raises:
        TimeConversionError: If the instant falls outside the range a
            datetime can represent, or is not a finite number.
    """
    try:
        return _EPOCH + timedelta(milliseconds=millis)
    except (OverflowError, ValueError) as exc:
        raise TimeConversionError(
            f"Cannot convert {millis!r} ms since epoch to a timestamp: {exc}"
        ) from exc


def now(clock: TimeSource = system_clock) -> datetime:
    """Read *clock* once and convert the reading to a protocol timestamp."""
    return xml_time_for(clock())
