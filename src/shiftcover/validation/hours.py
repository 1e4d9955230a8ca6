"""Weekly hour limits per employee.

Hours are summed from each assigned shift's ``duration_hours`` over
Sunday-based weeks.
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, timedelta

from shiftcover.domain.models import Assignment, Employee, Shift, day_of_week
from shiftcover.validation.evaluator import resolve_shift

DEFAULT_MAX_WEEKLY_HOURS = 40.0


def week_start(d: date) -> date:
    """The Sunday on or before a date."""
    return d - timedelta(days=day_of_week(d))


@dataclass(frozen=True)
class WeeklyHoursIssue:
    """An employee scheduled above their weekly limit."""

    employee_id: str
    week_start: date
    scheduled_hours: float
    max_hours: float

    def __str__(self) -> str:
        return (
            f"Employee {self.employee_id} week of {self.week_start}: "
            f"{self.scheduled_hours:.1f}h scheduled, max {self.max_hours:.1f}h"
        )


class WeeklyHoursChecker:
    """Checks scheduled hours against each employee's weekly limit."""

    def __init__(self, default_max_hours: float = DEFAULT_MAX_WEEKLY_HOURS):
        self.default_max_hours = default_max_hours

    def weekly_hours(
        self,
        assignments: Iterable[Assignment],
        shifts_by_id: Mapping[str, Shift],
    ) -> dict[tuple[str, date], float]:
        """Scheduled hours keyed by (employee ID, week start)."""
        totals: dict[tuple[str, date], float] = defaultdict(float)
        for assignment in assignments:
            shift = resolve_shift(assignment, shifts_by_id)
            if shift is None or assignment.employee_id is None:
                continue
            totals[(assignment.employee_id, week_start(assignment.date))] += shift.duration_hours
        return dict(totals)

    def check(
        self,
        assignments: Iterable[Assignment],
        shifts_by_id: Mapping[str, Shift],
        employees_by_id: Mapping[str, Employee],
    ) -> list[WeeklyHoursIssue]:
        """Employees over their limit, ordered by employee then week.

        Employees missing from ``employees_by_id`` are held to the default
        limit.
        """
        issues = []
        totals = self.weekly_hours(assignments, shifts_by_id)
        for employee_id, start in sorted(totals):
            hours = totals[(employee_id, start)]
            employee = employees_by_id.get(employee_id)
            max_hours = self.default_max_hours
            if employee is not None and employee.max_weekly_hours is not None:
                max_hours = employee.max_weekly_hours
            if hours > max_hours:
                issues.append(WeeklyHoursIssue(employee_id, start, hours, max_hours))
        return issues
