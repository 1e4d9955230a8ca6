"""Tests for the requirement evaluator."""

from datetime import date

import pytest

from shiftcover.domain.models import (
    Assignment,
    Employee,
    Position,
    Shift,
    TimeBasedRequirement,
)
from shiftcover.domain.policies import PositionSupervisorPolicy
from shiftcover.domain.timewindow import TimeWindow
from shiftcover.validation.evaluator import (
    RequirementEvaluator,
    evaluate,
    group_assignments,
    statuses_for_date,
)
from shiftcover.validation.results import GapType

MONDAY = date(2024, 1, 1)
TUESDAY = date(2024, 1, 2)


def make_assignments(count, shift_id, on_date=MONDAY, supervisors=0, prefix="A"):
    return [
        Assignment(
            id=f"{prefix}{i}",
            schedule_id="S1",
            employee_id=f"E{i}",
            shift_id=shift_id,
            date=on_date,
            is_supervisor_shift=i < supervisors,
        )
        for i in range(count)
    ]


class TestRequirementEvaluator:
    """Tests for RequirementEvaluator."""

    @pytest.fixture
    def shifts_by_id(self):
        shifts = [
            Shift("day", "Day (10h)", TimeWindow.parse("09:00", "19:00")),
            Shift("grave", "Graveyard (10h)", TimeWindow.parse("19:00", "05:00"), True),
            Shift("early", "Early (4h)", TimeWindow.parse("05:00", "09:00")),
        ]
        return {s.id: s for s in shifts}

    @pytest.fixture
    def midday(self):
        return TimeBasedRequirement(
            "R1", "S1", 1, TimeWindow.parse("09:00", "21:00"), min_employees=8, min_supervisors=1
        )

    def test_supervisor_shortfall(self, midday, shifts_by_id):
        """Enough staff but no supervisor yields only a supervisor gap."""
        status = evaluate(midday, MONDAY, make_assignments(8, "day"), shifts_by_id)

        assert status.actual_total == 8
        assert status.actual_supervisors == 0
        assert status.is_satisfied is False

        gaps = status.gaps()
        assert len(gaps) == 1
        assert gaps[0].gap_type == GapType.SUPERVISOR
        assert (gaps[0].required, gaps[0].actual) == (1, 0)

    def test_satisfied(self, midday, shifts_by_id):
        """Meeting both thresholds is satisfied with no gaps."""
        status = evaluate(midday, MONDAY, make_assignments(8, "day", supervisors=1), shifts_by_id)
        assert status.is_satisfied
        assert status.gaps() == []

    def test_short_on_both_thresholds(self, midday, shifts_by_id):
        """A block short on total and supervisors yields two gaps, total first."""
        status = evaluate(midday, MONDAY, make_assignments(3, "day"), shifts_by_id)
        gaps = status.gaps()
        assert [g.gap_type for g in gaps] == [GapType.TOTAL, GapType.SUPERVISOR]
        assert (gaps[0].required, gaps[0].actual) == (8, 3)

    def test_status_fields(self, midday, shifts_by_id):
        """Status carries the requirement's thresholds and identity."""
        status = evaluate(midday, MONDAY, [], shifts_by_id)
        assert status.date == MONDAY
        assert status.time_block == midday.window
        assert status.required_total == 8
        assert status.required_supervisors == 1
        assert status.max_total is None
        assert status.requirement_id == "R1"

    def test_non_overlapping_shift_not_counted(self, midday, shifts_by_id):
        """An early shift ending at 09:00 does not count toward 09:00-21:00."""
        status = evaluate(midday, MONDAY, make_assignments(8, "early"), shifts_by_id)
        assert status.actual_total == 0

    def test_night_shift_counts_toward_morning_block(self, shifts_by_id):
        """A 19:00-05:00 shift overlaps a 01:00-05:00 block."""
        requirement = TimeBasedRequirement("R2", "S1", 1, TimeWindow.parse("01:00", "05:00"), 2)
        status = evaluate(requirement, MONDAY, make_assignments(2, "grave"), shifts_by_id)
        assert status.is_satisfied

    def test_night_shift_counts_toward_crossing_block(self, shifts_by_id):
        """A 19:00-05:00 shift overlaps a 21:00-01:00 block."""
        requirement = TimeBasedRequirement(
            "R3", "S1", 1, TimeWindow.parse("21:00", "01:00", True), 1
        )
        status = evaluate(requirement, MONDAY, make_assignments(1, "grave"), shifts_by_id)
        assert status.actual_total == 1

    def test_max_employees_boundary(self, shifts_by_id):
        """Exactly the maximum is satisfied; one more is a total gap."""
        requirement = TimeBasedRequirement(
            "R1", "S1", 1, TimeWindow.parse("09:00", "21:00"), 6, max_employees=8
        )

        at_max = evaluate(requirement, MONDAY, make_assignments(8, "day"), shifts_by_id)
        assert at_max.is_satisfied

        over = evaluate(requirement, MONDAY, make_assignments(9, "day"), shifts_by_id)
        assert over.is_satisfied is False
        gaps = over.gaps()
        assert len(gaps) == 1
        assert gaps[0].gap_type == GapType.TOTAL
        assert (gaps[0].required, gaps[0].actual) == (8, 9)
        assert gaps[0].is_over_max

    def test_adding_assignments_never_lowers_total(self, midday, shifts_by_id):
        """Each added overlapping assignment keeps or raises the count."""
        assignments = make_assignments(10, "day", supervisors=2)
        previous = -1
        for n in range(len(assignments) + 1):
            status = evaluate(midday, MONDAY, assignments[:n], shifts_by_id)
            assert status.actual_total >= previous
            previous = status.actual_total
        assert previous == 10

    def test_removing_max_never_adds_gaps(self, shifts_by_id):
        """Dropping the maximum removes the over-max gap only."""
        window = TimeWindow.parse("09:00", "21:00")
        capped = TimeBasedRequirement("R1", "S1", 1, window, 6, max_employees=8, min_supervisors=1)
        uncapped = TimeBasedRequirement("R1", "S1", 1, window, 6, min_supervisors=1)

        for supervisors in (0, 1):
            assignments = make_assignments(9, "day", supervisors=supervisors)
            with_max = evaluate(capped, MONDAY, assignments, shifts_by_id)
            without_max = evaluate(uncapped, MONDAY, assignments, shifts_by_id)

            assert GapType.TOTAL in [g.gap_type for g in with_max.gaps()]
            assert GapType.TOTAL not in [g.gap_type for g in without_max.gaps()]
            assert without_max.supervisors_met == with_max.supervisors_met
            kinds_with_max = {g.gap_type for g in with_max.gaps()}
            assert {g.gap_type for g in without_max.gaps()} <= kinds_with_max

    def test_dangling_shift_skipped(self, midday, shifts_by_id):
        """Assignments with an unknown or missing shift are not counted."""
        assignments = make_assignments(8, "day", supervisors=1)
        assignments.append(Assignment("X1", "S1", "E9", "missing", MONDAY))
        assignments.append(Assignment("X2", "S1", "E10", None, MONDAY))
        status = evaluate(midday, MONDAY, assignments, shifts_by_id)
        assert status.actual_total == 8

    def test_missing_employee_skipped(self, midday, shifts_by_id):
        """Assignments without an employee are not counted."""
        assignments = [Assignment("X1", "S1", None, "day", MONDAY, True)]
        status = evaluate(midday, MONDAY, assignments, shifts_by_id)
        assert status.actual_total == 0
        assert status.actual_supervisors == 0

    def test_position_policy(self, midday, shifts_by_id):
        """The position policy counts supervisory employees without the flag."""
        assignments = make_assignments(8, "day")
        employees = {
            "E0": Employee("E0", "Sam", "Shift", Position.SHIFT_SUPERVISOR),
        }
        evaluator = RequirementEvaluator(PositionSupervisorPolicy())
        status = evaluator.evaluate(midday, MONDAY, assignments, shifts_by_id, employees)
        assert status.actual_supervisors == 1
        assert status.is_satisfied

    def test_default_policy_ignores_position(self, midday, shifts_by_id):
        """The default policy looks at the assignment flag only."""
        assignments = make_assignments(8, "day")
        employees = {
            "E0": Employee("E0", "Sam", "Shift", Position.SHIFT_SUPERVISOR),
        }
        status = RequirementEvaluator().evaluate(
            midday, MONDAY, assignments, shifts_by_id, employees
        )
        assert status.actual_supervisors == 0


class TestStatusesForDate:
    """Tests for statuses_for_date and group_assignments."""

    @pytest.fixture
    def shifts_by_id(self):
        return {"day": Shift("day", "Day", TimeWindow.parse("09:00", "19:00"))}

    @pytest.fixture
    def requirements(self):
        return [
            TimeBasedRequirement("R-late", "S1", 1, TimeWindow.parse("13:00", "17:00"), 1),
            TimeBasedRequirement("R-early", "S1", 1, TimeWindow.parse("09:00", "13:00"), 1),
            TimeBasedRequirement("R-tue", "S1", 2, TimeWindow.parse("09:00", "13:00"), 1),
        ]

    def test_filters_by_weekday_and_sorts(self, requirements, shifts_by_id):
        """Only Monday requirements are evaluated, ordered by start time."""
        statuses = statuses_for_date(MONDAY, requirements, [], shifts_by_id)
        assert [s.requirement_id for s in statuses] == ["R-early", "R-late"]

    def test_only_counts_assignments_on_date(self, requirements, shifts_by_id):
        """Assignments on other dates are ignored."""
        assignments = make_assignments(1, "day", on_date=TUESDAY)
        statuses = statuses_for_date(MONDAY, requirements, assignments, shifts_by_id)
        assert all(s.actual_total == 0 for s in statuses)

    def test_group_assignments(self):
        """Assignments group by date and then shift."""
        assignments = (
            make_assignments(2, "day")
            + make_assignments(1, "grave", prefix="B")
            + make_assignments(1, "day", on_date=TUESDAY, prefix="C")
        )
        grouped = group_assignments(assignments)
        assert set(grouped) == {MONDAY, TUESDAY}
        assert [a.id for a in grouped[MONDAY]["day"]] == ["A0", "A1"]
        assert [a.id for a in grouped[MONDAY]["grave"]] == ["B0"]
        assert [a.id for a in grouped[TUESDAY]["day"]] == ["C0"]
