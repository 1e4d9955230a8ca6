"""Detection of overlapping assignments for the same employee.

A conflict is advisory: the checker answers whether a candidate would
double-book an employee, and the calling layer decides whether to block
or warn. Existing assignments whose shift cannot be resolved are treated
as non-conflicting.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Optional

from shiftcover.domain.models import Assignment, Shift
from shiftcover.domain.timewindow import TimeWindow
from shiftcover.validation.evaluator import resolve_shift

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateAssignment:
    """A proposed assignment to check before saving.

    Attributes:
        employee_id: Employee to be assigned.
        date: Date of the proposed assignment.
        shift_window: Time window of the proposed shift.
        exclude_assignment_id: ID of an existing assignment being edited,
            so that it is not compared against itself.
    """

    employee_id: str
    date: date
    shift_window: TimeWindow
    exclude_assignment_id: Optional[str] = None


@dataclass(frozen=True)
class AssignmentConflict:
    """An existing assignment that overlaps a candidate."""

    assignment_id: str
    shift_id: str
    window: TimeWindow

    def __str__(self) -> str:
        return f"Overlaps assignment {self.assignment_id} (shift {self.shift_id}, {self.window})"


@dataclass(frozen=True)
class DoubleBooking:
    """Two assignments of one employee overlapping on the same date."""

    employee_id: str
    date: date
    first_assignment_id: str
    second_assignment_id: str

    def __str__(self) -> str:
        return (
            f"Employee {self.employee_id} double-booked on {self.date}: "
            f"{self.first_assignment_id} and {self.second_assignment_id}"
        )


class AssignmentOverlapChecker:
    """Checks candidate assignments against an employee's existing ones.

    Example:
        >>> checker = AssignmentOverlapChecker()
        >>> candidate = CandidateAssignment("E1", date(2024, 1, 1), window)
        >>> checker.has_conflict(candidate, existing, shifts_by_id)
        False
    """

    def _iter_conflicts(
        self,
        candidate: CandidateAssignment,
        existing: Iterable[Assignment],
        shifts_by_id: Mapping[str, Shift],
    ) -> Iterable[AssignmentConflict]:
        for assignment in existing:
            if assignment.employee_id != candidate.employee_id:
                continue
            if assignment.date != candidate.date:
                continue
            if (
                candidate.exclude_assignment_id is not None
                and assignment.id == candidate.exclude_assignment_id
            ):
                continue

            shift = resolve_shift(assignment, shifts_by_id)
            if shift is None:
                logger.warning(
                    "Assignment %s references unknown shift %s; treated as non-conflicting",
                    assignment.id,
                    assignment.shift_id,
                )
                continue

            if shift.window.overlaps(candidate.shift_window):
                yield AssignmentConflict(assignment.id, shift.id, shift.window)

    def has_conflict(
        self,
        candidate: CandidateAssignment,
        existing: Iterable[Assignment],
        shifts_by_id: Mapping[str, Shift],
    ) -> bool:
        """Check if a candidate overlaps any existing assignment.

        Stops at the first conflict found.
        """
        for _ in self._iter_conflicts(candidate, existing, shifts_by_id):
            return True
        return False

    def find_conflicts(
        self,
        candidate: CandidateAssignment,
        existing: Iterable[Assignment],
        shifts_by_id: Mapping[str, Shift],
    ) -> list[AssignmentConflict]:
        """Every existing assignment the candidate overlaps."""
        return list(self._iter_conflicts(candidate, existing, shifts_by_id))

    def find_double_bookings(
        self,
        assignments: Iterable[Assignment],
        shifts_by_id: Mapping[str, Shift],
    ) -> list[DoubleBooking]:
        """Scan a set of assignments for overlapping pairs per employee and date.

        Pairs are returned ordered by date, employee, then assignment order.
        """
        groups: dict[tuple[date, str], list[tuple[Assignment, Shift]]] = defaultdict(list)
        for assignment in assignments:
            if assignment.employee_id is None:
                continue
            shift = resolve_shift(assignment, shifts_by_id)
            if shift is None:
                continue
            groups[(assignment.date, assignment.employee_id)].append((assignment, shift))

        bookings = []
        for (on_date, employee_id) in sorted(groups):
            entries = groups[(on_date, employee_id)]
            for i, (first, first_shift) in enumerate(entries):
                for second, second_shift in entries[i + 1 :]:
                    if first_shift.window.overlaps(second_shift.window):
                        bookings.append(
                            DoubleBooking(employee_id, on_date, first.id, second.id)
                        )
        return bookings


def has_conflict(
    candidate: CandidateAssignment,
    existing: Iterable[Assignment],
    shifts_by_id: Mapping[str, Shift],
) -> bool:
    """Check a candidate with a default checker."""
    return AssignmentOverlapChecker().has_conflict(candidate, existing, shifts_by_id)
