# hopper/cli/commands/resume.py
"""
Resume an interrupted or partially failed run.

Usage:
    hopper resume --dir ./docs
    hopper resume --url https://docs.example.com
    hopper resume --url https://docs.example.com --max-pages 200
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from hopper.cli import context
from hopper.cli.ui import ui
from hopper.cli.utils import follow, run_async
from hopper.ingest.resume import ResumeScope


def command(
    ctx: typer.Context,
    directory: Optional[Path] = typer.Option(None, "--dir", "-d", help="Directory scope."),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Crawl seed scope."),
    max_pages: Optional[int] = typer.Option(
        None, "--max-pages", "-m", min=1, help="Page cap for --url (default: crawler.max_pages)."
    ),
    operation_id: Optional[str] = typer.Option(None, "--operation-id"),
) -> None:
    """
    Re-queue unfinished and failed entries in a scope and process them.

    Exactly one of --dir or --url is required.
    """
    if bool(directory) == bool(url):
        ui.error("Provide exactly one of --dir or --url")
        raise typer.Exit(2)

    scope = ResumeScope(directory=str(directory) if directory else None, url=url)
    config = context.CLIContext.from_typer(ctx).config

    async def _run():
        async with context.build_service(config) as service:
            operation = service.operations.create("resume", scope.label, operation_id)
            return await follow(
                service.broadcaster,
                operation.operation_id,
                service.resume(scope, max_pages, operation=operation),
                "Resuming",
            )

    ui.header("hopper resume", scope.label)
    operation = run_async(_run())
    ui.operation_summary(operation)
