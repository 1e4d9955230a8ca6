"""Domain models for the coverage engine.

This module contains the plain records the engine consumes: employees,
shifts, schedules, time-based staffing requirements and assignments.
All invariants are checked at construction time so that malformed data
is rejected before any validation pass runs.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from shiftcover.domain.errors import InvalidRecord
from shiftcover.domain.timewindow import TimeWindow

# Stored durations are NUMERIC(4,2)
DURATION_TOLERANCE_HOURS = 0.01


def day_of_week(d: date) -> int:
    """Day of week with 0 = Sunday through 6 = Saturday."""
    return (d.weekday() + 1) % 7


class Position(Enum):
    """Employee job positions."""

    DISPATCHER = "dispatcher"
    SHIFT_SUPERVISOR = "shift_supervisor"
    MANAGEMENT = "management"

    @property
    def is_supervisory(self) -> bool:
        """Whether this position can supervise a shift."""
        return self in (Position.SHIFT_SUPERVISOR, Position.MANAGEMENT)


class ScheduleStatus(Enum):
    """Lifecycle state of a schedule."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


@dataclass(frozen=True)
class Employee:
    """An employee who can be assigned to shifts.

    Attributes:
        id: Unique identifier.
        first_name: Given name.
        last_name: Family name.
        position: Job position.
        is_active: Inactive employees are not counted toward coverage.
        max_weekly_hours: Weekly hour limit, if one applies.
    """

    id: str
    first_name: str
    last_name: str
    position: Position = Position.DISPATCHER
    is_active: bool = True
    max_weekly_hours: Optional[float] = None

    def __post_init__(self):
        if self.max_weekly_hours is not None and self.max_weekly_hours <= 0:
            raise InvalidRecord(
                f"Employee {self.id}: max_weekly_hours must be positive"
            )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class Shift:
    """A named shift template with a time window.

    Attributes:
        id: Unique identifier.
        name: Display name (e.g., "Graveyard (10h)").
        window: Time window the shift covers.
        requires_supervisor: Whether someone must supervise this shift.
        duration_hours: Length of the shift. Filled in from the window
            when omitted; must match the window span otherwise.
    """

    id: str
    name: str
    window: TimeWindow
    requires_supervisor: bool = False
    duration_hours: Optional[float] = None

    def __post_init__(self):
        expected = self.window.duration_hours
        if self.duration_hours is None:
            object.__setattr__(self, "duration_hours", expected)
        elif abs(float(self.duration_hours) - expected) > DURATION_TOLERANCE_HOURS:
            raise InvalidRecord(
                f"Shift {self.id}: duration_hours {self.duration_hours} does not "
                f"match window {self.window} ({expected:.2f}h)"
            )


@dataclass(frozen=True)
class Schedule:
    """A schedule covering an inclusive range of calendar dates."""

    id: str
    start_date: date
    end_date: date
    name: str = ""
    status: ScheduleStatus = ScheduleStatus.DRAFT

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise InvalidRecord(
                f"Schedule {self.id}: start_date {self.start_date} is after "
                f"end_date {self.end_date}"
            )

    @property
    def day_count(self) -> int:
        return (self.end_date - self.start_date).days + 1


@dataclass(frozen=True)
class TimeBasedRequirement:
    """Staffing requirement for a time block on one day of the week.

    Attributes:
        id: Unique identifier.
        schedule_id: Schedule the requirement belongs to.
        day_of_week: 0 = Sunday through 6 = Saturday.
        window: Time block the requirement applies to.
        min_employees: Minimum headcount overlapping the block.
        max_employees: Maximum headcount, or None for no upper limit.
        min_supervisors: Minimum supervisory headcount.
    """

    id: str
    schedule_id: str
    day_of_week: int
    window: TimeWindow
    min_employees: int
    max_employees: Optional[int] = None
    min_supervisors: int = 0

    def __post_init__(self):
        if not 0 <= self.day_of_week <= 6:
            raise InvalidRecord(
                f"Requirement {self.id}: day_of_week {self.day_of_week} is outside 0-6"
            )
        if self.min_employees < 0:
            raise InvalidRecord(f"Requirement {self.id}: min_employees is negative")
        if self.min_supervisors < 0:
            raise InvalidRecord(f"Requirement {self.id}: min_supervisors is negative")
        if self.min_supervisors > self.min_employees:
            raise InvalidRecord(
                f"Requirement {self.id}: min_supervisors {self.min_supervisors} "
                f"exceeds min_employees {self.min_employees}"
            )
        if self.max_employees is not None and self.max_employees < self.min_employees:
            raise InvalidRecord(
                f"Requirement {self.id}: max_employees {self.max_employees} "
                f"is below min_employees {self.min_employees}"
            )

    def applies_to(self, d: date) -> bool:
        """Check if the requirement is evaluated on a given date."""
        return day_of_week(d) == self.day_of_week


@dataclass(frozen=True)
class Assignment:
    """An employee scheduled on a shift for a calendar date.

    ``employee_id`` and ``shift_id`` may be None while an assignment is
    not fully resolved; such assignments are not counted toward coverage.
    """

    id: str
    schedule_id: str
    employee_id: Optional[str]
    shift_id: Optional[str]
    date: date
    is_supervisor_shift: bool = False
