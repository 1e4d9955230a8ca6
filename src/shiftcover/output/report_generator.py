"""Plain-text coverage report.

This module renders a validation result as a human-readable text file:
- Per-date requirement statuses with actual versus required counts
- Coverage gaps, grouped by date
- Data-integrity diagnostics and warnings
"""

from collections import defaultdict
from pathlib import Path
from typing import Optional, Union

from shiftcover.domain.models import Schedule
from shiftcover.validation.conflicts import DoubleBooking
from shiftcover.validation.hours import WeeklyHoursIssue
from shiftcover.validation.results import CoverageValidation, RequirementStatus


class ReportGenerator:
    """Generates text reports for coverage validation results.

    Example:
        >>> generator = ReportGenerator()
        >>> text = generator.generate_to_string(validation, schedule)
    """

    def generate(
        self,
        validation: CoverageValidation,
        schedule: Schedule,
        output_path: Union[str, Path],
        double_bookings: Optional[list[DoubleBooking]] = None,
        hours_issues: Optional[list[WeeklyHoursIssue]] = None,
    ) -> str:
        """Generate the report and save it to a file.

        Args:
            validation: Result of coverage validation.
            schedule: The validated schedule.
            output_path: Path to save the text file.
            double_bookings: Optional double-booking findings to include.
            hours_issues: Optional weekly hour findings to include.

        Returns:
            The generated text content.
        """
        content = self._generate_content(validation, schedule, double_bookings, hours_issues)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(
        self,
        validation: CoverageValidation,
        schedule: Schedule,
        double_bookings: Optional[list[DoubleBooking]] = None,
        hours_issues: Optional[list[WeeklyHoursIssue]] = None,
    ) -> str:
        """Generate the report and return it as a string."""
        return self._generate_content(validation, schedule, double_bookings, hours_issues)

    def _generate_content(
        self,
        validation: CoverageValidation,
        schedule: Schedule,
        double_bookings: Optional[list[DoubleBooking]],
        hours_issues: Optional[list[WeeklyHoursIssue]],
    ) -> str:
        lines = []

        title = schedule.name or schedule.id
        lines.append("=" * 80)
        lines.append(f"COVERAGE REPORT - {title}")
        lines.append(f"{schedule.start_date} to {schedule.end_date} ({schedule.day_count} days)")
        lines.append("=" * 80)
        lines.append("")

        satisfied = sum(1 for s in validation.statuses if s.is_satisfied)
        lines.append(f"Result: {'VALID' if validation.is_valid else 'INVALID'}")
        lines.append(f"Requirement blocks checked: {len(validation.statuses)}")
        lines.append(f"Blocks satisfied: {satisfied}")
        lines.append(f"Coverage gaps: {len(validation.gaps)}")
        lines.append("")

        # Statuses grouped by date
        by_date: dict = defaultdict(list)
        for status in validation.statuses:
            by_date[status.date].append(status)

        lines.append("-" * 80)
        lines.append("REQUIREMENT STATUS BY DATE")
        lines.append("-" * 80)
        lines.append(f"{'Block':^13} {'Staff':>9} {'Max':>5} {'Supv':>7}  Status")

        for d in sorted(by_date):
            lines.append("")
            lines.append(f"{d} ({d.strftime('%A')})")
            for status in by_date[d]:
                lines.append(self._status_line(status))

        lines.append("")

        lines.append("-" * 80)
        lines.append("COVERAGE GAPS")
        lines.append("-" * 80)
        if validation.gaps:
            for gap in validation.gaps:
                lines.append(f"  {gap}")
        else:
            lines.append("  None")
        lines.append("")

        if validation.dangling_references:
            lines.append("-" * 80)
            lines.append("DATA INTEGRITY")
            lines.append("-" * 80)
            for reference in validation.dangling_references:
                lines.append(f"  {reference}")
            lines.append("")

        if validation.warnings:
            lines.append("-" * 80)
            lines.append("WARNINGS")
            lines.append("-" * 80)
            for warning in validation.warnings:
                lines.append(f"  {warning}")
            lines.append("")

        if double_bookings:
            lines.append("-" * 80)
            lines.append("DOUBLE BOOKINGS")
            lines.append("-" * 80)
            for booking in double_bookings:
                lines.append(f"  {booking}")
            lines.append("")

        if hours_issues:
            lines.append("-" * 80)
            lines.append("WEEKLY HOURS")
            lines.append("-" * 80)
            for issue in hours_issues:
                lines.append(f"  {issue}")
            lines.append("")

        lines.append("=" * 80)
        lines.append("END OF REPORT")
        lines.append("=" * 80)

        return "\n".join(lines)

    def _status_line(self, status: RequirementStatus) -> str:
        block = str(status.time_block)
        staff = f"{status.actual_total}/{status.required_total}"
        max_total = str(status.max_total) if status.max_total is not None else "-"
        supervisors = f"{status.actual_supervisors}/{status.required_supervisors}"
        flag = "ok" if status.is_satisfied else "GAP"
        return f"{block:^13} {staff:>9} {max_total:>5} {supervisors:>7}  {flag}"
