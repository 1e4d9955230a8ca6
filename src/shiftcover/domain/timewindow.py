"""Wall-clock time arithmetic and time window overlap.

Times are stored as integer minutes since midnight (0-1439). A window
may cross midnight, in which case its end is at or before its start on
the clock face and the window wraps past 24:00.

Overlap is decided on a "double day" axis running from 0 to 2880
minutes. A crossing window occupies ``[start, 1440 + end)``. A
non-crossing window is placed twice, at ``[start, end)`` and at
``[start + 1440, end + 1440)``, so that it is compared against both
halves of a crossing window. Intervals are half-open: windows that only
touch at an endpoint do not overlap.
"""

import re
from dataclasses import dataclass
from datetime import time
from typing import Optional

from shiftcover.domain.errors import InvalidTimeFormat, InvalidWindow

MINUTES_PER_DAY = 1440

_TIME_PATTERN = re.compile(r"([0-9]{2}):([0-9]{2})(?::([0-9]{2}))?")


def to_minutes(t: time) -> int:
    """Minutes since midnight for a time of day (seconds are dropped)."""
    return t.hour * 60 + t.minute


def parse_time(value: str) -> int:
    """Parse an ``HH:MM`` or ``HH:MM:SS`` string into minutes since midnight.

    Args:
        value: 24-hour wall-clock string.

    Returns:
        Minutes since midnight, 0-1439.

    Raises:
        InvalidTimeFormat: If the string does not match the pattern or a
            component is out of range.
    """
    if not isinstance(value, str):
        raise InvalidTimeFormat(f"Expected a time string, got {value!r}")

    match = _TIME_PATTERN.fullmatch(value)
    if match is None:
        raise InvalidTimeFormat(f"Time {value!r} is not in HH:MM[:SS] format")

    hour = int(match.group(1))
    minute = int(match.group(2))
    second = int(match.group(3) or 0)
    if hour > 23 or minute > 59 or second > 59:
        raise InvalidTimeFormat(f"Time {value!r} is out of range")

    return to_minutes(time(hour=hour, minute=minute, second=second))


def format_time(minutes: int) -> str:
    """Render minutes since midnight as ``HH:MM``."""
    hours, mins = divmod(minutes % MINUTES_PER_DAY, 60)
    return f"{hours:02d}:{mins:02d}"


@dataclass(frozen=True)
class TimeWindow:
    """A start/end wall-clock pair with an explicit midnight-crossing flag.

    Attributes:
        start: Start minute (inclusive), 0-1439.
        end: End minute (exclusive), 0-1439.
        crosses_midnight: True if the window wraps past 24:00.
    """

    start: int
    end: int
    crosses_midnight: bool = False

    def __post_init__(self):
        for name in ("start", "end"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidWindow(f"Window {name} must be an integer minute, got {value!r}")
            if not 0 <= value < MINUTES_PER_DAY:
                raise InvalidWindow(f"Window {name} {value} is outside 0-1439")

        if self.crosses_midnight:
            # start == end would be a full 24 hours; rejected rather than
            # treated as matching everything.
            if self.end >= self.start:
                raise InvalidWindow(
                    f"Window {format_time(self.start)}-{format_time(self.end)} "
                    f"is flagged as crossing midnight but does not wrap"
                )
        elif self.start >= self.end:
            raise InvalidWindow(
                f"Window {format_time(self.start)}-{format_time(self.end)} "
                f"has no positive span"
            )

    @classmethod
    def parse(
        cls,
        start: str,
        end: str,
        crosses_midnight: Optional[bool] = None,
    ) -> "TimeWindow":
        """Build a window from wall-clock strings.

        Args:
            start: Start time, ``HH:MM`` or ``HH:MM:SS``.
            end: End time, same format.
            crosses_midnight: Explicit flag. If None, the window is taken
                to cross midnight when ``end <= start``.
        """
        start_minutes = parse_time(start)
        end_minutes = parse_time(end)
        if crosses_midnight is None:
            crosses_midnight = end_minutes <= start_minutes
        return cls(start_minutes, end_minutes, crosses_midnight)

    @property
    def span_minutes(self) -> int:
        """Length of the window in minutes."""
        return span_minutes(self)

    @property
    def duration_hours(self) -> float:
        """Length of the window in hours."""
        return self.span_minutes / 60

    def intervals(self) -> list[tuple[int, int]]:
        """Half-open intervals on the double-day axis."""
        if self.crosses_midnight:
            return [(self.start, MINUTES_PER_DAY + self.end)]
        return [
            (self.start, self.end),
            (self.start + MINUTES_PER_DAY, self.end + MINUTES_PER_DAY),
        ]

    def overlaps(self, other: "TimeWindow") -> bool:
        """Check if this window shares at least one minute with another."""
        return overlaps(self, other)

    def __str__(self) -> str:
        return f"{format_time(self.start)}-{format_time(self.end)}"


def span_minutes(window: TimeWindow) -> int:
    """Span of a window in minutes, always positive for a valid window."""
    if window.crosses_midnight:
        return (MINUTES_PER_DAY - window.start) + window.end
    return window.end - window.start


def overlaps(a: TimeWindow, b: TimeWindow) -> bool:
    """Check whether two windows intersect. Symmetric in its arguments."""
    for a_start, a_end in a.intervals():
        for b_start, b_end in b.intervals():
            if a_start < b_end and b_start < a_end:
                return True
    return False
