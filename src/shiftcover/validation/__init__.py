"""Coverage validation and conflict detection."""

from shiftcover.validation.conflicts import (
    AssignmentConflict,
    AssignmentOverlapChecker,
    CandidateAssignment,
    DoubleBooking,
    has_conflict,
)
from shiftcover.validation.coverage import (
    CoverageConfig,
    CoverageValidator,
    assignments_in_scope,
    validate,
)
from shiftcover.validation.evaluator import (
    RequirementEvaluator,
    evaluate,
    group_assignments,
    statuses_for_date,
)
from shiftcover.validation.hours import WeeklyHoursChecker, WeeklyHoursIssue
from shiftcover.validation.results import (
    CoverageGap,
    CoverageValidation,
    DanglingReference,
    Err,
    GapType,
    Ok,
    RequirementStatus,
    ValidationInputError,
)

__all__ = [
    "AssignmentConflict",
    "AssignmentOverlapChecker",
    "CandidateAssignment",
    "CoverageConfig",
    "CoverageGap",
    "CoverageValidation",
    "CoverageValidator",
    "DanglingReference",
    "DoubleBooking",
    "Err",
    "GapType",
    "Ok",
    "RequirementEvaluator",
    "RequirementStatus",
    "ValidationInputError",
    "WeeklyHoursChecker",
    "WeeklyHoursIssue",
    "assignments_in_scope",
    "evaluate",
    "group_assignments",
    "has_conflict",
    "statuses_for_date",
    "validate",
]
