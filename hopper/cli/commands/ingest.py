# hopper/cli/commands/ingest.py
"""
Bulk directory ingestion.

Usage:
    hopper ingest ./docs
    hopper ingest ./docs --pattern "*.pdf" --pattern "*.docx"
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from hopper.cli import context
from hopper.cli.ui import ui
from hopper.cli.utils import follow, run_async
from hopper.ingest.sources.directory import enumerate_files


def command(
    ctx: typer.Context,
    directory: Path = typer.Argument(..., help="Directory to ingest recursively."),
    pattern: Optional[List[str]] = typer.Option(
        None,
        "--pattern",
        "-p",
        help="Filename glob (repeatable). Defaults to bulk.file_patterns.",
    ),
    operation_id: Optional[str] = typer.Option(
        None, "--operation-id", help="Explicit operation id."
    ),
) -> None:
    """
    Ingest every matching file under DIRECTORY.

    Unchanged, already completed files are skipped. Failed files stay
    failed until `hopper resume --dir` is run.
    """
    cli_ctx = context.CLIContext.from_typer(ctx)
    config = cli_ctx.config
    patterns = pattern or config.bulk.file_patterns

    async def _run():
        enumerate_files(directory, patterns)
        async with context.build_service(config) as service:
            operation = service.operations.create("ingest", str(directory), operation_id)
            return await follow(
                service.broadcaster,
                operation.operation_id,
                service.ingest_directory(directory, patterns, operation=operation),
                "Ingesting",
            )

    ui.header("hopper ingest", str(directory))
    operation = run_async(_run())
    ui.operation_summary(operation)
