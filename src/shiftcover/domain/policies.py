"""Policy definitions for coverage counting.

Policies are kept separate from the validation engine so the rule for
who counts as a supervisor can be swapped without touching the
evaluator.
"""

from abc import ABC, abstractmethod
from typing import Optional

from shiftcover.domain.models import Assignment, Employee


class SupervisorPolicy(ABC):
    """Abstract base class for supervisor counting policies."""

    @abstractmethod
    def counts_as_supervisor(
        self,
        assignment: Assignment,
        employee: Optional[Employee],
    ) -> bool:
        """Check whether an assignment counts toward supervisor coverage.

        Args:
            assignment: The assignment being counted.
            employee: The assigned employee, if known.
        """
        pass


class DefaultSupervisorPolicy(SupervisorPolicy):
    """Counts assignments explicitly marked as supervisor shifts."""

    def counts_as_supervisor(
        self,
        assignment: Assignment,
        employee: Optional[Employee],
    ) -> bool:
        return assignment.is_supervisor_shift


class PositionSupervisorPolicy(SupervisorPolicy):
    """Also counts employees holding a supervisory position.

    An assignment marked as a supervisor shift always counts. Otherwise it
    counts when the employee is a shift supervisor or in management.
    """

    def counts_as_supervisor(
        self,
        assignment: Assignment,
        employee: Optional[Employee],
    ) -> bool:
        if assignment.is_supervisor_shift:
            return True
        return employee is not None and employee.position.is_supervisory
