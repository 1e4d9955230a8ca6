"""Output generation for coverage reports."""

from shiftcover.output.pdf_generator import PDFGenerator
from shiftcover.output.report_generator import ReportGenerator

__all__ = ["PDFGenerator", "ReportGenerator"]
