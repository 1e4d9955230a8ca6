"""Evaluation of a single staffing requirement on a single date."""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Optional

from shiftcover.domain.models import Assignment, Employee, Shift, TimeBasedRequirement
from shiftcover.domain.policies import DefaultSupervisorPolicy, SupervisorPolicy
from shiftcover.validation.results import RequirementStatus

logger = logging.getLogger(__name__)


def resolve_shift(
    assignment: Assignment,
    shifts_by_id: Mapping[str, Shift],
) -> Optional[Shift]:
    """Look up an assignment's shift, or None if the reference dangles."""
    if assignment.shift_id is None:
        return None
    return shifts_by_id.get(assignment.shift_id)


class RequirementEvaluator:
    """Counts staffing for one requirement on one date.

    The caller supplies only assignments for the evaluated date (and only
    for active employees) and only requirements whose day of week matches
    that date. Assignments whose shift cannot be resolved, or that have no
    employee, are skipped; reporting them is up to the caller.

    Example:
        >>> evaluator = RequirementEvaluator()
        >>> status = evaluator.evaluate(requirement, day, assignments, shifts_by_id)
        >>> status.is_satisfied
        True
    """

    def __init__(self, supervisor_policy: Optional[SupervisorPolicy] = None):
        self.supervisor_policy = supervisor_policy or DefaultSupervisorPolicy()

    def evaluate(
        self,
        requirement: TimeBasedRequirement,
        on_date: date,
        assignments: Iterable[Assignment],
        shifts_by_id: Mapping[str, Shift],
        employees_by_id: Optional[Mapping[str, Employee]] = None,
    ) -> RequirementStatus:
        """Evaluate a requirement against the assignments of one date.

        Args:
            requirement: Requirement to evaluate.
            on_date: Date being evaluated.
            assignments: Assignments on ``on_date``.
            shifts_by_id: Dict mapping shift IDs to Shift objects.
            employees_by_id: Optional dict mapping employee IDs to Employee
                objects, passed to the supervisor policy.

        Returns:
            RequirementStatus with actual counts and satisfaction.
        """
        actual_total = 0
        actual_supervisors = 0

        for assignment in assignments:
            shift = resolve_shift(assignment, shifts_by_id)
            if shift is None or assignment.employee_id is None:
                continue
            if not shift.window.overlaps(requirement.window):
                continue

            actual_total += 1
            employee = None
            if employees_by_id is not None:
                employee = employees_by_id.get(assignment.employee_id)
            if self.supervisor_policy.counts_as_supervisor(assignment, employee):
                actual_supervisors += 1

        is_satisfied = (
            actual_total >= requirement.min_employees
            and (requirement.max_employees is None or actual_total <= requirement.max_employees)
            and actual_supervisors >= requirement.min_supervisors
        )

        logger.debug(
            "Requirement %s on %s %s: total=%d/%d supervisors=%d/%d satisfied=%s",
            requirement.id,
            on_date,
            requirement.window,
            actual_total,
            requirement.min_employees,
            actual_supervisors,
            requirement.min_supervisors,
            is_satisfied,
        )

        return RequirementStatus(
            date=on_date,
            time_block=requirement.window,
            required_total=requirement.min_employees,
            actual_total=actual_total,
            required_supervisors=requirement.min_supervisors,
            actual_supervisors=actual_supervisors,
            is_satisfied=is_satisfied,
            max_total=requirement.max_employees,
            requirement_id=requirement.id,
        )


def evaluate(
    requirement: TimeBasedRequirement,
    on_date: date,
    assignments: Iterable[Assignment],
    shifts_by_id: Mapping[str, Shift],
) -> RequirementStatus:
    """Evaluate a requirement with the default supervisor policy."""
    return RequirementEvaluator().evaluate(requirement, on_date, assignments, shifts_by_id)


def statuses_for_date(
    on_date: date,
    requirements: Iterable[TimeBasedRequirement],
    assignments: Iterable[Assignment],
    shifts_by_id: Mapping[str, Shift],
    evaluator: Optional[RequirementEvaluator] = None,
) -> list[RequirementStatus]:
    """Statuses of every requirement that applies on a date.

    Unlike ``RequirementEvaluator.evaluate`` this works out the weekday
    itself and filters assignments to the date, so it accepts a whole
    schedule's worth of requirements and assignments.
    """
    evaluator = evaluator or RequirementEvaluator()
    day_assignments = [a for a in assignments if a.date == on_date]
    matching = sorted(
        (r for r in requirements if r.applies_to(on_date)),
        key=lambda r: (r.window.start, r.window.end, r.id),
    )
    return [
        evaluator.evaluate(requirement, on_date, day_assignments, shifts_by_id)
        for requirement in matching
    ]


def group_assignments(
    assignments: Iterable[Assignment],
) -> dict[date, dict[Optional[str], list[Assignment]]]:
    """Group assignments by date, then by shift ID."""
    grouped: dict[date, dict[Optional[str], list[Assignment]]] = defaultdict(
        lambda: defaultdict(list)
    )
    for assignment in assignments:
        grouped[assignment.date][assignment.shift_id].append(assignment)
    return {d: dict(by_shift) for d, by_shift in grouped.items()}
