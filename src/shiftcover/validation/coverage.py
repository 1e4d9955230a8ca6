"""Coverage validation across a schedule's full date range.

This module is the entry point for checking a decided set of
assignments against a schedule's time-based requirements. It never
assigns staff itself; it reports where coverage falls short.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Optional

from shiftcover.domain.models import Assignment, Employee, Shift, TimeBasedRequirement, day_of_week
from shiftcover.domain.policies import DefaultSupervisorPolicy, SupervisorPolicy
from shiftcover.validation.evaluator import RequirementEvaluator, resolve_shift
from shiftcover.validation.results import (
    CoverageValidation,
    DanglingReference,
    Err,
    Ok,
    ValidationInputError,
    ValidationOutcome,
)

logger = logging.getLogger(__name__)


@dataclass
class CoverageConfig:
    """Configuration for coverage validation.

    Attributes:
        supervisor_policy: Decides which assignments count as supervisors.
        check_shift_supervisors: Warn when a supervisor-required shift is
            staffed on a date without anyone counted as supervisor.
        max_range_days: Longest schedule range accepted, or None for no limit.
    """

    supervisor_policy: SupervisorPolicy = field(default_factory=DefaultSupervisorPolicy)
    check_shift_supervisors: bool = True
    max_range_days: Optional[int] = 366


def iter_dates(start_date: date, end_date: date) -> Iterable[date]:
    """Every calendar date from start to end, inclusive."""
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def assignments_in_scope(
    schedule: Any,
    assignments: Iterable[Assignment],
    employees_by_id: Optional[Mapping[str, Employee]] = None,
) -> list[Assignment]:
    """Assignments dated within the schedule for employees who can be counted.

    With ``employees_by_id``, assignments for unknown or inactive employees
    are left out, as they are when coverage is counted.
    """
    scoped = []
    for assignment in assignments:
        if not schedule.start_date <= assignment.date <= schedule.end_date:
            continue
        if assignment.employee_id is None:
            continue
        if employees_by_id is not None:
            employee = employees_by_id.get(assignment.employee_id)
            if employee is None or not employee.is_active:
                continue
        scoped.append(assignment)
    return scoped


class CoverageValidator:
    """Validates schedule coverage against time-based requirements.

    Each call works only on its own arguments and holds no state between
    calls, so one validator can be shared across threads.

    Example:
        >>> validator = CoverageValidator()
        >>> outcome = validator.validate(schedule, requirements, assignments, shifts_by_id)
        >>> if outcome.is_ok and not outcome.value.is_valid:
        ...     for gap in outcome.value.gaps:
        ...         print(gap)
    """

    def __init__(self, config: Optional[CoverageConfig] = None):
        self.config = config or CoverageConfig()
        self.evaluator = RequirementEvaluator(self.config.supervisor_policy)

    def validate(
        self,
        schedule: Any,
        requirements: Iterable[TimeBasedRequirement],
        assignments: Iterable[Assignment],
        shifts_by_id: Mapping[str, Shift],
        employees_by_id: Optional[Mapping[str, Employee]] = None,
    ) -> ValidationOutcome:
        """Validate coverage for every date of a schedule.

        Args:
            schedule: Object with ``start_date`` and ``end_date`` (and
                optionally ``id``), normally a Schedule.
            requirements: Requirements of the schedule.
            assignments: Assignments of the schedule.
            shifts_by_id: Dict mapping shift IDs to Shift objects.
            employees_by_id: Optional dict mapping employee IDs to Employee
                objects. When given, assignments for inactive or unknown
                employees are not counted.

        Returns:
            Ok with a CoverageValidation, or Err with a ValidationInputError
            if the input itself is unusable.
        """
        requirements = list(requirements)
        assignments = list(assignments)

        input_error = self._check_input(schedule, requirements)
        if input_error is not None:
            logger.warning("Coverage validation rejected input: %s", input_error)
            return Err(input_error)

        start_date, end_date = schedule.start_date, schedule.end_date
        result = CoverageValidation(is_valid=True)

        in_range = [a for a in assignments if start_date <= a.date <= end_date]
        if len(in_range) < len(assignments):
            logger.debug(
                "Ignoring %d assignments outside %s..%s",
                len(assignments) - len(in_range),
                start_date,
                end_date,
            )

        countable = self._countable_assignments(in_range, shifts_by_id, employees_by_id, result)

        by_date: dict[date, list[Assignment]] = defaultdict(list)
        for assignment in countable:
            by_date[assignment.date].append(assignment)

        by_weekday: dict[int, list[TimeBasedRequirement]] = defaultdict(list)
        for requirement in requirements:
            by_weekday[requirement.day_of_week].append(requirement)
        for day_requirements in by_weekday.values():
            day_requirements.sort(key=lambda r: (r.window.start, r.window.end, r.id))

        for current in iter_dates(start_date, end_date):
            day_assignments = by_date.get(current, [])
            for requirement in by_weekday.get(day_of_week(current), []):
                status = self.evaluator.evaluate(
                    requirement, current, day_assignments, shifts_by_id, employees_by_id
                )
                result.statuses.append(status)
                for gap in status.gaps():
                    result.add_gap(gap)

            if self.config.check_shift_supervisors:
                self._check_shift_supervisors(
                    current, day_assignments, shifts_by_id, employees_by_id, result
                )

        logger.info(
            "Validated %s..%s: %d statuses, %d gaps, %d dangling references",
            start_date,
            end_date,
            len(result.statuses),
            len(result.gaps),
            len(result.dangling_references),
        )
        return Ok(result)

    def _check_input(
        self,
        schedule: Any,
        requirements: list[TimeBasedRequirement],
    ) -> Optional[ValidationInputError]:
        """Return the first problem with the input, if any."""
        start_date = getattr(schedule, "start_date", None)
        end_date = getattr(schedule, "end_date", None)
        if not isinstance(start_date, date) or not isinstance(end_date, date):
            return ValidationInputError("schedule needs start_date and end_date dates", "schedule")
        if start_date > end_date:
            return ValidationInputError(
                f"start_date {start_date} is after end_date {end_date}", "schedule"
            )

        days = (end_date - start_date).days + 1
        if self.config.max_range_days is not None and days > self.config.max_range_days:
            return ValidationInputError(
                f"range of {days} days exceeds the limit of {self.config.max_range_days}",
                "schedule",
            )

        schedule_id = getattr(schedule, "id", None)
        if schedule_id is not None:
            for requirement in requirements:
                if requirement.schedule_id != schedule_id:
                    return ValidationInputError(
                        f"requirement {requirement.id} belongs to schedule "
                        f"{requirement.schedule_id}, not {schedule_id}",
                        "requirements",
                    )
        return None

    def _countable_assignments(
        self,
        assignments: list[Assignment],
        shifts_by_id: Mapping[str, Shift],
        employees_by_id: Optional[Mapping[str, Employee]],
        result: CoverageValidation,
    ) -> list[Assignment]:
        """Drop unresolved assignments, recording dangling references."""
        countable = []
        for assignment in assignments:
            usable = True

            if resolve_shift(assignment, shifts_by_id) is None:
                self._add_dangling(result, assignment, "shift_id", assignment.shift_id)
                usable = False

            if assignment.employee_id is None:
                self._add_dangling(result, assignment, "employee_id", None)
                usable = False
            elif employees_by_id is not None:
                employee = employees_by_id.get(assignment.employee_id)
                if employee is None:
                    self._add_dangling(
                        result, assignment, "employee_id", assignment.employee_id
                    )
                    usable = False
                elif not employee.is_active:
                    logger.debug(
                        "Skipping assignment %s for inactive employee %s",
                        assignment.id,
                        employee.id,
                    )
                    usable = False

            if usable:
                countable.append(assignment)
        return countable

    def _add_dangling(
        self,
        result: CoverageValidation,
        assignment: Assignment,
        field_name: str,
        reference: Optional[str],
    ) -> None:
        dangling = DanglingReference(assignment.id, field_name, reference)
        if dangling not in result.dangling_references:
            logger.warning("%s", dangling)
            result.dangling_references.append(dangling)

    def _check_shift_supervisors(
        self,
        on_date: date,
        assignments: list[Assignment],
        shifts_by_id: Mapping[str, Shift],
        employees_by_id: Optional[Mapping[str, Employee]],
        result: CoverageValidation,
    ) -> None:
        """Warn about supervisor-required shifts staffed without a supervisor."""
        by_shift: dict[str, list[Assignment]] = defaultdict(list)
        for assignment in assignments:
            by_shift[assignment.shift_id].append(assignment)

        for shift_id in sorted(by_shift):
            shift = shifts_by_id[shift_id]
            if not shift.requires_supervisor:
                continue
            supervised = any(
                self.config.supervisor_policy.counts_as_supervisor(
                    a,
                    employees_by_id.get(a.employee_id) if employees_by_id is not None else None,
                )
                for a in by_shift[shift_id]
            )
            if not supervised:
                result.add_warning(
                    f"{on_date} {shift.name} ({shift.window}) requires a supervisor "
                    f"but none is assigned"
                )


def validate(
    schedule: Any,
    requirements: Iterable[TimeBasedRequirement],
    assignments: Iterable[Assignment],
    shifts_by_id: Mapping[str, Shift],
) -> ValidationOutcome:
    """Validate coverage with the default configuration."""
    return CoverageValidator().validate(schedule, requirements, assignments, shifts_by_id)
