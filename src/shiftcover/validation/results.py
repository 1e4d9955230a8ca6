"""Result structures produced by the validation engine.

Everything here is computed, never persisted. Statuses and gaps are
frozen so that two validation runs over the same input compare equal.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Generic, Optional, TypeVar, Union

from shiftcover.domain.timewindow import TimeWindow

T = TypeVar("T")
E = TypeVar("E")


class GapType(Enum):
    """Which threshold of a requirement was not met."""

    TOTAL = "total"
    SUPERVISOR = "supervisor"


@dataclass(frozen=True)
class CoverageGap:
    """A requirement/date/time-block combination that is not covered.

    ``required`` and ``actual`` refer to the violated threshold. For an
    over-staffed block ``required`` is the maximum headcount.
    """

    date: date
    time_block: TimeWindow
    gap_type: GapType
    required: int
    actual: int
    requirement_id: str

    @property
    def is_over_max(self) -> bool:
        return self.gap_type == GapType.TOTAL and self.actual > self.required

    def __str__(self) -> str:
        if self.is_over_max:
            problem = f"{self.actual} assigned, max {self.required}"
        else:
            problem = f"{self.actual} assigned, need {self.required}"
        return f"[{self.gap_type.value}] {self.date} {self.time_block}: {problem}"

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "time_block": {"start": self.time_block.start, "end": self.time_block.end},
            "type": self.gap_type.value,
            "required": self.required,
            "actual": self.actual,
            "requirement_id": self.requirement_id,
        }


@dataclass(frozen=True)
class RequirementStatus:
    """Actual staffing against one requirement on one date.

    Attributes:
        date: Date evaluated.
        time_block: The requirement's time window.
        required_total: Minimum headcount.
        actual_total: Assignments whose shift overlaps the block.
        required_supervisors: Minimum supervisory headcount.
        actual_supervisors: Overlapping assignments counted as supervisors.
        is_satisfied: True if every threshold is met.
        max_total: Maximum headcount, if any.
        requirement_id: ID of the evaluated requirement.
    """

    date: date
    time_block: TimeWindow
    required_total: int
    actual_total: int
    required_supervisors: int
    actual_supervisors: int
    is_satisfied: bool
    max_total: Optional[int] = None
    requirement_id: str = ""

    @property
    def total_met(self) -> bool:
        if self.actual_total < self.required_total:
            return False
        return self.max_total is None or self.actual_total <= self.max_total

    @property
    def supervisors_met(self) -> bool:
        return self.actual_supervisors >= self.required_supervisors

    def gaps(self) -> list[CoverageGap]:
        """One gap per violated threshold, total before supervisor."""
        gaps = []
        if not self.total_met:
            over_max = self.max_total is not None and self.actual_total > self.max_total
            gaps.append(
                CoverageGap(
                    date=self.date,
                    time_block=self.time_block,
                    gap_type=GapType.TOTAL,
                    required=self.max_total if over_max else self.required_total,
                    actual=self.actual_total,
                    requirement_id=self.requirement_id,
                )
            )
        if not self.supervisors_met:
            gaps.append(
                CoverageGap(
                    date=self.date,
                    time_block=self.time_block,
                    gap_type=GapType.SUPERVISOR,
                    required=self.required_supervisors,
                    actual=self.actual_supervisors,
                    requirement_id=self.requirement_id,
                )
            )
        return gaps

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "time_block": {"start": self.time_block.start, "end": self.time_block.end},
            "required_total": self.required_total,
            "actual_total": self.actual_total,
            "max_total": self.max_total,
            "required_supervisors": self.required_supervisors,
            "actual_supervisors": self.actual_supervisors,
            "is_satisfied": self.is_satisfied,
            "requirement_id": self.requirement_id,
        }


@dataclass(frozen=True)
class DanglingReference:
    """An assignment pointing at a record missing from the supplied data."""

    assignment_id: str
    field_name: str
    reference: Optional[str]

    def __str__(self) -> str:
        if self.reference is None:
            return f"Assignment {self.assignment_id} has no {self.field_name}"
        return (
            f"Assignment {self.assignment_id} references unknown "
            f"{self.field_name} {self.reference}"
        )

    def to_dict(self) -> dict:
        return {
            "assignment_id": self.assignment_id,
            "field": self.field_name,
            "reference": self.reference,
        }


@dataclass
class CoverageValidation:
    """Result of validating a schedule's coverage."""

    is_valid: bool
    gaps: list[CoverageGap] = field(default_factory=list)
    statuses: list[RequirementStatus] = field(default_factory=list)
    dangling_references: list[DanglingReference] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_gap(self, gap: CoverageGap) -> None:
        """Add a gap and mark as invalid."""
        self.gaps.append(gap)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def gaps_for(self, d: date) -> list[CoverageGap]:
        return [g for g in self.gaps if g.date == d]

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "gaps": [g.to_dict() for g in self.gaps],
            "statuses": [s.to_dict() for s in self.statuses],
            "dangling_references": [r.to_dict() for r in self.dangling_references],
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class ValidationInputError:
    """The caller supplied input the engine cannot validate."""

    message: str
    field_name: Optional[str] = None

    def __str__(self) -> str:
        if self.field_name:
            return f"{self.field_name}: {self.message}"
        return self.message


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed result carrying an error value."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self):
        raise ValueError(f"Called unwrap on an error result: {self.error}")


ValidationOutcome = Union[Ok[CoverageValidation], Err[ValidationInputError]]
