"""Command-line interface for the shift coverage validator."""

import argparse
import json
import logging
import sys
from datetime import date, timedelta
from typing import Optional

from shiftcover.domain.models import (
    Assignment,
    Employee,
    Position,
    Schedule,
    Shift,
    TimeBasedRequirement,
)
from shiftcover.domain.policies import DefaultSupervisorPolicy, PositionSupervisorPolicy
from shiftcover.domain.records import ScheduleDataset, load_dataset
from shiftcover.domain.timewindow import TimeWindow
from shiftcover.output.pdf_generator import PDFGenerator
from shiftcover.output.report_generator import ReportGenerator
from shiftcover.validation.conflicts import AssignmentOverlapChecker, CandidateAssignment
from shiftcover.validation.coverage import (
    CoverageConfig,
    CoverageValidator,
    assignments_in_scope,
)
from shiftcover.validation.hours import WeeklyHoursChecker

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_BAD_INPUT = 2

SUPERVISOR_POLICIES = {
    "flag": DefaultSupervisorPolicy,
    "position": PositionSupervisorPolicy,
}


def create_sample_dataset(start_date: Optional[date] = None, days: int = 7) -> ScheduleDataset:
    """Create a sample schedule for demonstration.

    Shifts and requirements follow the default dispatch center setup:
    6 staff from 05:00, 8 from 09:00, 7 from 21:00 through 01:00 and 6
    overnight, each block needing one supervisor.

    Args:
        start_date: First day of the schedule. If None, uses today.
        days: Number of days to schedule.
    """
    if start_date is None:
        start_date = date.today()
    schedule = Schedule(
        id="S1",
        name="Sample Schedule",
        start_date=start_date,
        end_date=start_date + timedelta(days=days - 1),
    )

    shifts = [
        Shift("early", "Day Shift Early (10h)", TimeWindow.parse("05:00", "15:00"), True),
        Shift("day", "Day Shift (10h)", TimeWindow.parse("09:00", "19:00"), True),
        Shift("swing", "Swing Shift (10h)", TimeWindow.parse("15:00", "01:00"), True),
        Shift("grave", "Graveyard (10h)", TimeWindow.parse("19:00", "05:00"), True),
    ]

    blocks = [
        ("05:00", "09:00", 6),
        ("09:00", "21:00", 8),
        ("21:00", "01:00", 7),
        ("01:00", "05:00", 6),
    ]
    requirements = [
        TimeBasedRequirement(
            id=f"R{dow}-{i}",
            schedule_id=schedule.id,
            day_of_week=dow,
            window=TimeWindow.parse(start, end),
            min_employees=minimum,
            min_supervisors=1,
        )
        for dow in range(7)
        for i, (start, end, minimum) in enumerate(blocks)
    ]

    names = [
        "Alice", "Bob", "Carol", "David", "Eve", "Frank", "Grace", "Henry",
        "Ivy", "Jack", "Kate", "Leo", "Mia", "Noah", "Olivia", "Paul",
        "Quinn", "Rose", "Sam", "Tina", "Uma", "Victor", "Wendy", "Xavier",
    ]
    employees = []
    for i, name in enumerate(names):
        position = Position.SHIFT_SUPERVISOR if i % 6 == 0 else Position.DISPATCHER
        employees.append(
            Employee(
                id=f"E{i + 1:03d}",
                first_name=name,
                last_name="Sample",
                position=position,
                is_active=i != len(names) - 1,
                max_weekly_hours=40,
            )
        )

    assignments = []
    for offset in range(days):
        d = start_date + timedelta(days=offset)
        for i, employee in enumerate(employees):
            # Two rotating days off per employee
            if (i + offset) % 7 in (0, 1):
                continue
            shift = shifts[i % len(shifts)]
            assignments.append(
                Assignment(
                    id=f"A{offset:02d}-{i:03d}",
                    schedule_id=schedule.id,
                    employee_id=employee.id,
                    shift_id=shift.id,
                    date=d,
                    is_supervisor_shift=employee.position.is_supervisory,
                )
            )

    return ScheduleDataset(
        schedule=schedule,
        employees=employees,
        shifts=shifts,
        requirements=requirements,
        assignments=assignments,
    )


def run_validate(
    dataset: ScheduleDataset,
    supervisor_policy: str = "flag",
    as_json: bool = False,
    report_path: Optional[str] = None,
    pdf_path: Optional[str] = None,
) -> int:
    """Validate a dataset and print the findings."""
    config = CoverageConfig(supervisor_policy=SUPERVISOR_POLICIES[supervisor_policy]())
    validator = CoverageValidator(config)
    shifts_by_id = dataset.shifts_by_id
    employees_by_id = dataset.employees_by_id

    outcome = validator.validate(
        dataset.schedule,
        dataset.requirements,
        dataset.assignments,
        shifts_by_id,
        employees_by_id,
    )
    if not outcome.is_ok:
        print(f"Error: {outcome.error}", file=sys.stderr)
        return EXIT_BAD_INPUT
    validation = outcome.value

    scoped = assignments_in_scope(dataset.schedule, dataset.assignments, employees_by_id)
    double_bookings = AssignmentOverlapChecker().find_double_bookings(scoped, shifts_by_id)
    hours_issues = WeeklyHoursChecker().check(scoped, shifts_by_id, employees_by_id)

    if as_json:
        payload = validation.to_dict()
        payload["double_bookings"] = [
            {
                "employee_id": b.employee_id,
                "date": b.date.isoformat(),
                "assignment_ids": [b.first_assignment_id, b.second_assignment_id],
            }
            for b in double_bookings
        ]
        payload["weekly_hours"] = [
            {
                "employee_id": h.employee_id,
                "week_start": h.week_start.isoformat(),
                "scheduled_hours": h.scheduled_hours,
                "max_hours": h.max_hours,
            }
            for h in hours_issues
        ]
        print(json.dumps(payload, indent=2))
    else:
        schedule = dataset.schedule
        print(f"Schedule {schedule.name or schedule.id}: {schedule.start_date} to {schedule.end_date}")
        print(f"  Requirement blocks: {len(validation.statuses)}")
        if validation.is_valid:
            print("\n  Coverage: PASSED")
        else:
            print(f"\n  Coverage: FAILED ({len(validation.gaps)} gaps)")
            for gap in validation.gaps[:10]:
                print(f"    - {gap}")
            if len(validation.gaps) > 10:
                print(f"    ... and {len(validation.gaps) - 10} more gaps")

        for label, items in (
            ("Dangling references", validation.dangling_references),
            ("Warnings", validation.warnings),
            ("Double bookings", double_bookings),
            ("Weekly hours", hours_issues),
        ):
            if items:
                print(f"\n{label} ({len(items)}):")
                for item in items[:5]:
                    print(f"    - {item}")
                if len(items) > 5:
                    print(f"    ... and {len(items) - 5} more")

    if report_path:
        ReportGenerator().generate(
            validation, dataset.schedule, report_path, double_bookings, hours_issues
        )
        logger.info("Wrote text report to %s", report_path)
    if pdf_path:
        PDFGenerator().generate(validation, dataset.schedule, pdf_path)
        logger.info("Wrote PDF report to %s", pdf_path)

    has_findings = not validation.is_valid or bool(double_bookings)
    return EXIT_FINDINGS if has_findings else EXIT_OK


def run_check_conflict(
    dataset: ScheduleDataset,
    employee_id: str,
    on_date: date,
    shift_id: str,
    exclude_assignment_id: Optional[str] = None,
) -> int:
    """Check whether assigning an employee to a shift would double-book them."""
    shifts_by_id = dataset.shifts_by_id
    shift = shifts_by_id.get(shift_id)
    if shift is None:
        print(f"Error: unknown shift {shift_id}", file=sys.stderr)
        return EXIT_BAD_INPUT

    candidate = CandidateAssignment(
        employee_id=employee_id,
        date=on_date,
        shift_window=shift.window,
        exclude_assignment_id=exclude_assignment_id,
    )
    conflicts = AssignmentOverlapChecker().find_conflicts(
        candidate, dataset.assignments, shifts_by_id
    )
    if not conflicts:
        print(f"No conflict: {employee_id} can work {shift.name} ({shift.window}) on {on_date}")
        return EXIT_OK

    print(f"Conflict: {shift.name} ({shift.window}) on {on_date} overlaps an existing assignment")
    for conflict in conflicts:
        print(f"    - {conflict}")
    return EXIT_FINDINGS


def _parse_date_arg(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a YYYY-MM-DD date")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shiftcover",
        description="Shift coverage validator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s validate data.json                 Validate coverage
  %(prog)s validate data.json --json          Print the result as JSON
  %(prog)s validate data.json --pdf out.pdf   Also write a PDF report

  %(prog)s check-conflict data.json --employee E1 --date 2024-01-01 --shift S2

  %(prog)s demo                               Validate a built-in sample week
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log engine details",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    validate_parser = subparsers.add_parser("validate", help="Validate schedule coverage")
    validate_parser.add_argument("dataset", help="Path to a JSON dataset file")
    validate_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
    validate_parser.add_argument(
        "--report", "-r",
        type=str,
        help="Output text report path",
    )
    validate_parser.add_argument(
        "--pdf", "-o",
        type=str,
        help="Output PDF report path",
    )
    validate_parser.add_argument(
        "--supervisor-policy", "-s",
        type=str,
        default="flag",
        choices=sorted(SUPERVISOR_POLICIES),
        help="Who counts as a supervisor: flag (supervisor shifts only, default) "
        "or position (also shift supervisors and management)",
    )

    conflict_parser = subparsers.add_parser(
        "check-conflict",
        help="Check a proposed assignment for overlaps",
    )
    conflict_parser.add_argument("dataset", help="Path to a JSON dataset file")
    conflict_parser.add_argument("--employee", "-e", required=True, help="Employee ID")
    conflict_parser.add_argument(
        "--date", "-d",
        required=True,
        type=_parse_date_arg,
        help="Assignment date (YYYY-MM-DD)",
    )
    conflict_parser.add_argument("--shift", "-s", required=True, help="Shift ID")
    conflict_parser.add_argument(
        "--exclude", "-x",
        help="ID of the assignment being edited",
    )

    demo_parser = subparsers.add_parser("demo", help="Validate a built-in sample schedule")
    demo_parser.add_argument(
        "--days", "-d",
        type=int,
        default=7,
        help="Number of days to schedule (default: 7)",
    )
    demo_parser.add_argument(
        "--report", "-r",
        type=str,
        help="Output text report path",
    )
    demo_parser.add_argument(
        "--pdf", "-o",
        type=str,
        help="Output PDF report path",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "demo":
        if args.days < 1:
            print("Error: --days must be at least 1", file=sys.stderr)
            return EXIT_BAD_INPUT
        dataset = create_sample_dataset(days=args.days)
        return run_validate(dataset, report_path=args.report, pdf_path=args.pdf)

    if args.command in ("validate", "check-conflict"):
        try:
            dataset = load_dataset(args.dataset)
        except (OSError, ValueError) as exc:
            print(f"Error: could not load {args.dataset}: {exc}", file=sys.stderr)
            return EXIT_BAD_INPUT

        if args.command == "validate":
            return run_validate(
                dataset,
                supervisor_policy=args.supervisor_policy,
                as_json=args.json,
                report_path=args.report,
                pdf_path=args.pdf,
            )
        return run_check_conflict(
            dataset,
            args.employee,
            args.date,
            args.shift,
            args.exclude,
        )

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
