# hopper/cli/ui/output.py
"""Styled output for hopper commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .console import CHECK, CROSS, Panel, Table, console

if TYPE_CHECKING:
    from hopper.ingest.operations import Operation
    from hopper.ingest.state.schema import ManifestStats


class OutputMixin:
    def header(self, title: str, subtitle: str = "") -> None:
        """Boxed command banner."""
        body = f"[bold]{title}[/bold]" + (f"\n[dim]{subtitle}[/dim]" if subtitle else "")
        console.print(Panel.fit(body, border_style="blue"))

    def success(self, msg: str) -> None:
        console.print(f"[green]{CHECK}[/green] {msg}")

    def error(self, msg: str) -> None:
        console.print(f"[red]{CROSS}[/red] {msg}")

    def info(self, msg: str) -> None:
        console.print(f"[dim]{msg}[/dim]")

    def operation_summary(self, operation: "Operation") -> None:
        """Final counters of a run; yellow when any item failed."""
        rows = [
            ("Total", operation.total),
            ("Completed", operation.completed),
            ("Skipped", operation.skipped),
            ("Errors", operation.errors),
            ("Chunks", operation.chunks_total),
        ]
        rows += [(key.replace("_", " ").capitalize(), value) for key, value in operation.details.items()]
        lines = [f"{label + ':':<10} {value}" for label, value in rows]
        if operation.error:
            lines.append(f"[red]{operation.error}[/red]")

        console.print(
            Panel(
                "\n".join(lines),
                title=f"Operation {operation.operation_id} ({operation.status.value})",
                border_style="yellow" if operation.errors or operation.error else "green",
            )
        )

    def manifest_stats(self, stats: "ManifestStats", path: str) -> None:
        table = Table(title=f"Manifest {path}")
        for column in ("Total", "Completed", "Errors", "Pending", "Chunks"):
            table.add_column(column, justify="right")
        table.add_row(
            *(
                str(v)
                for v in (stats.total, stats.completed, stats.errors, stats.pending, stats.chunks_total)
            )
        )
        console.print(table)
