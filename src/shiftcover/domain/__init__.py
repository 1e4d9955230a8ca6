"""Domain models, time arithmetic and counting policies."""

from shiftcover.domain.errors import InvalidRecord, InvalidTimeFormat, InvalidWindow
from shiftcover.domain.models import (
    Assignment,
    Employee,
    Position,
    Schedule,
    ScheduleStatus,
    Shift,
    TimeBasedRequirement,
    day_of_week,
)
from shiftcover.domain.policies import (
    DefaultSupervisorPolicy,
    PositionSupervisorPolicy,
    SupervisorPolicy,
)
from shiftcover.domain.records import ScheduleDataset, load_dataset
from shiftcover.domain.timewindow import (
    TimeWindow,
    format_time,
    overlaps,
    parse_time,
    span_minutes,
    to_minutes,
)

__all__ = [
    # Errors
    "InvalidRecord",
    "InvalidTimeFormat",
    "InvalidWindow",
    # Models
    "Assignment",
    "Employee",
    "Position",
    "Schedule",
    "ScheduleStatus",
    "Shift",
    "TimeBasedRequirement",
    "day_of_week",
    # Policies
    "DefaultSupervisorPolicy",
    "PositionSupervisorPolicy",
    "SupervisorPolicy",
    # Records
    "ScheduleDataset",
    "load_dataset",
    # Time
    "TimeWindow",
    "format_time",
    "overlaps",
    "parse_time",
    "span_minutes",
    "to_minutes",
]
