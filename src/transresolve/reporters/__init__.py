"""Exposes the reporters for use by other modules."""

from .preview_reporter import PreviewReporter
from .summary_reporter import SummaryReporter

__all__ = ["PreviewReporter", "SummaryReporter"]
