"""PDF generation for coverage reports.

This module creates printable PDF reports showing:
- A summary page with overall validity and gap counts
- One table per date listing each requirement block's staffing
- Unsatisfied blocks highlighted
"""

from collections import defaultdict
from io import BytesIO
from pathlib import Path
from typing import Union

from shiftcover.domain.models import Schedule
from shiftcover.validation.results import CoverageValidation, RequirementStatus

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    "satisfied": (0.85, 0.95, 0.85),  # Light green
    "gap": (1.0, 0.8, 0.8),  # Light red
    "header": (0.85, 0.85, 0.9),  # Light gray-blue
}

COLUMNS = [
    ("Block", 0),
    ("Staff", 110),
    ("Min", 170),
    ("Max", 220),
    ("Supervisors", 270),
    ("Min Supv", 360),
    ("Status", 440),
]


def _require_reportlab():
    try:
        from reportlab.lib.pagesizes import letter  # noqa: F401
    except ImportError:
        raise ImportError(
            "reportlab is required for PDF generation. "
            "Install with: pip install reportlab"
        )


class PDFGenerator:
    """Generates printable PDF coverage reports.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(validation, schedule, "coverage.pdf")
    """

    def __init__(
        self,
        page_width: float = 612,  # Letter portrait width (8.5")
        page_height: float = 792,  # Letter portrait height (11")
        margin: float = 36,  # 0.5 inch margins
        row_height: float = 16,
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin
        self.row_height = row_height

    def generate(
        self,
        validation: CoverageValidation,
        schedule: Schedule,
        output_path: Union[str, Path],
    ) -> None:
        """Generate the PDF report and save it to a file.

        Args:
            validation: Result of coverage validation.
            schedule: The validated schedule.
            output_path: Path to save the PDF.
        """
        _require_reportlab()
        from reportlab.pdfgen import canvas

        c = canvas.Canvas(str(output_path), pagesize=(self.page_width, self.page_height))
        self._draw(c, validation, schedule)
        c.save()

    def generate_to_buffer(
        self,
        validation: CoverageValidation,
        schedule: Schedule,
    ) -> BytesIO:
        """Generate the PDF report and return it as a bytes buffer."""
        _require_reportlab()
        from reportlab.pdfgen import canvas

        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=(self.page_width, self.page_height))
        self._draw(c, validation, schedule)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw(self, c, validation: CoverageValidation, schedule: Schedule) -> None:
        self._draw_summary_page(c, validation, schedule)

        by_date: dict = defaultdict(list)
        for status in validation.statuses:
            by_date[status.date].append(status)

        y = self._start_page(c, schedule)
        for d in sorted(by_date):
            needed = self.row_height * (len(by_date[d]) + 2)
            if y - needed < self.margin:
                c.showPage()
                y = self._start_page(c, schedule)
            y = self._draw_date_table(c, d, by_date[d], y)
        c.showPage()

    def _start_page(self, c, schedule: Schedule) -> float:
        """Draw the page title and return the first usable y position."""
        c.setFont("Helvetica-Bold", 14)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 14,
            f"Coverage - {schedule.name or schedule.id}",
        )
        return self.page_height - self.margin - 40

    def _draw_summary_page(
        self,
        c,
        validation: CoverageValidation,
        schedule: Schedule,
    ) -> None:
        """Draw summary page with overall result and gap list."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Coverage Report - {schedule.name or schedule.id}",
        )

        y = self.page_height - self.margin - 50
        c.setFont("Helvetica", 10)
        satisfied = sum(1 for s in validation.statuses if s.is_satisfied)
        stats = [
            f"Dates: {schedule.start_date:%B %d, %Y} - {schedule.end_date:%B %d, %Y}",
            f"Result: {'VALID' if validation.is_valid else 'INVALID'}",
            f"Requirement blocks: {len(validation.statuses)} ({satisfied} satisfied)",
            f"Coverage gaps: {len(validation.gaps)}",
            f"Dangling references: {len(validation.dangling_references)}",
            f"Warnings: {len(validation.warnings)}",
        ]
        for stat in stats:
            c.drawString(self.margin + 20, y, stat)
            y -= 15

        if validation.gaps:
            y -= 15
            c.setFont("Helvetica-Bold", 12)
            c.drawString(self.margin, y, "Gaps")
            y -= 18
            c.setFont("Helvetica", 9)
            for gap in validation.gaps:
                if y < self.margin:
                    c.showPage()
                    c.setFont("Helvetica", 9)
                    y = self.page_height - self.margin - 20
                c.drawString(self.margin + 20, y, str(gap))
                y -= 13

        c.showPage()

    def _draw_date_table(self, c, d, statuses: list[RequirementStatus], y: float) -> float:
        """Draw one date's status table, returning the y below it."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 11)
        c.drawString(self.margin, y, d.strftime("%A, %B %d, %Y"))
        y -= self.row_height

        width = self.page_width - 2 * self.margin
        c.setFillColorRGB(*COLORS["header"])
        c.rect(self.margin, y - 4, width, self.row_height, fill=1, stroke=0)
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 9)
        for label, offset in COLUMNS:
            c.drawString(self.margin + 4 + offset, y, label)
        y -= self.row_height

        c.setFont("Helvetica", 9)
        for status in statuses:
            color = COLORS["satisfied"] if status.is_satisfied else COLORS["gap"]
            c.setFillColorRGB(*color)
            c.rect(self.margin, y - 4, width, self.row_height, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)

            values = [
                str(status.time_block),
                str(status.actual_total),
                str(status.required_total),
                str(status.max_total) if status.max_total is not None else "-",
                str(status.actual_supervisors),
                str(status.required_supervisors),
                "OK" if status.is_satisfied else "GAP",
            ]
            for (_, offset), value in zip(COLUMNS, values):
                c.drawString(self.margin + 4 + offset, y, value)
            y -= self.row_height

        return y - self.row_height / 2
