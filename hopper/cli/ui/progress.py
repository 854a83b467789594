# hopper/cli/ui/progress.py
"""
Live rendering of operation progress events.

Translates broadcaster events into a Rich progress bar plus dimmed
status lines for free-text messages (crawler notices).
"""

from __future__ import annotations

from typing import Optional

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from hopper.progress.broadcaster import ProgressEvent

from .console import STATUS_MARKS, console


class OperationProgress:
    """
    Usage:
        with ui.operation_progress("Ingesting") as view:
            view.handle(event)
    """

    def __init__(self, description: str):
        self.description = description
        self.progress: Optional[Progress] = None
        self.task = None

    def __enter__(self) -> "OperationProgress":
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console,
        )
        self.progress.__enter__()
        self.task = self.progress.add_task(self.description, total=None)
        return self

    def handle(self, event: ProgressEvent) -> None:
        data = event.data
        if event.event == "progress":
            message = data.get("message")
            if message:
                self.progress.console.print(f"[dim]{message}[/dim]")

            if data.get("status") == "processing_chunks":
                self.progress.update(
                    self.task,
                    description=(
                        f"{self.description} [dim]{data.get('file')} "
                        f"{data.get('current_chunk')}/{data.get('total_chunks')} chunks[/dim]"
                    ),
                )
                return

            total = data.get("total_files")
            self.progress.update(
                self.task,
                total=total or None,
                completed=data.get("current_file", 0),
            )
            if data.get("status") == "error":
                glyph, style = STATUS_MARKS["error"]
                self.progress.console.print(
                    f"[{style}]{glyph}[/{style}] {data.get('current_file_name')}: {data.get('error')}"
                )
        elif event.is_done:
            total = data.get("total_files", 0)
            self.progress.update(
                self.task, description=self.description, total=total, completed=total
            )

    def __exit__(self, *args):
        self.progress.__exit__(*args)


class ProgressMixin:
    """Mixin providing progress methods for the UI class."""

    def operation_progress(self, description: str = "Working...") -> OperationProgress:
        return OperationProgress(description)
