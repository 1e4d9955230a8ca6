"""Shift coverage validation engine."""

from shiftcover.domain import ScheduleDataset, TimeWindow, load_dataset, overlaps, parse_time
from shiftcover.validation import (
    AssignmentOverlapChecker,
    CoverageConfig,
    CoverageValidator,
    RequirementEvaluator,
    has_conflict,
    validate,
)

__version__ = "0.1.0"

__all__ = [
    "AssignmentOverlapChecker",
    "CoverageConfig",
    "CoverageValidator",
    "RequirementEvaluator",
    "ScheduleDataset",
    "TimeWindow",
    "has_conflict",
    "load_dataset",
    "overlaps",
    "parse_time",
    "validate",
]
