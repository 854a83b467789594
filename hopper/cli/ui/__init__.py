# hopper/cli/ui/__init__.py
"""
CLI UI components.

Usage:
    from hopper.cli.ui import ui

    ui.header("Ingest", "/data/pdfs")
    ui.success("Done!")
"""

from __future__ import annotations

from .console import Panel, Table, console
from .output import OutputMixin
from .progress import OperationProgress, ProgressMixin


class UI(OutputMixin, ProgressMixin):
    """Unified UI helpers on a shared Rich console."""


# Singleton instance
ui = UI()

__all__ = ["OperationProgress", "Panel", "Table", "UI", "console", "ui"]
