"""Layer 6: Report - Assemble ranked findings with provenance."""

from .report_generator import ReportGenerator

__all__ = ["ReportGenerator"]
