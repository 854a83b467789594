# hopper/cli/commands/stats.py
"""Manifest statistics."""

from __future__ import annotations

import typer

from hopper.cli import context
from hopper.cli.ui import ui
from hopper.cli.utils import run_async
from hopper.ingest.state.manager import ManifestStore


def command(ctx: typer.Context) -> None:
    """Show manifest totals by status."""
    config = context.CLIContext.from_typer(ctx).config

    async def _run():
        async with ManifestStore(config.manifest.path) as store:
            return await store.stats()

    stats = run_async(_run())
    ui.manifest_stats(stats, config.manifest.path)
