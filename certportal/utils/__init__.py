"""Utility modules for the certification portal."""

from .report import (
    STATUS_LABELS,
    generate_progress_report,
    percent,
    render_progress_markdown,
)

__all__ = [
    "STATUS_LABELS",
    "generate_progress_report",
    "percent",
    "render_progress_markdown",
]
