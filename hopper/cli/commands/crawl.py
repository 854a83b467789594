# hopper/cli/commands/crawl.py
"""
Website ingestion.

Usage:
    hopper crawl https://docs.example.com
    hopper crawl https://docs.example.com --max-pages 20
"""

from __future__ import annotations

from typing import Optional

import typer

from hopper.cli import context
from hopper.cli.ui import ui
from hopper.cli.utils import follow, run_async
from hopper.ingest.sources.crawler import validate_seed_url


def command(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Seed URL. Only its hostname is crawled."),
    max_pages: Optional[int] = typer.Option(
        None, "--max-pages", "-m", min=1, help="Page cap (default: crawler.max_pages)."
    ),
    operation_id: Optional[str] = typer.Option(None, "--operation-id"),
) -> None:
    """Crawl a site breadth-first and ingest every page."""
    config = context.CLIContext.from_typer(ctx).config

    async def _run():
        seed = validate_seed_url(url)
        async with context.build_service(config) as service:
            operation = service.operations.create("crawl", seed, operation_id)
            return await follow(
                service.broadcaster,
                operation.operation_id,
                service.crawl_site(seed, max_pages, operation=operation),
                "Crawling",
            )

    ui.header("hopper crawl", url)
    operation = run_async(_run())
    ui.operation_summary(operation)
