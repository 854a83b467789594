# hopper/cli/commands/clear.py
"""Wipe the manifest."""

from __future__ import annotations

import typer

from hopper.cli import context
from hopper.cli.ui import ui
from hopper.cli.utils import run_async
from hopper.ingest.state.manager import ManifestStore


def command(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """
    Delete every manifest entry. Irreversible.

    Vectors already in the index are not touched; the next run re-embeds
    everything and overwrites them in place.
    """
    config = context.CLIContext.from_typer(ctx).config

    if not yes and not typer.confirm(f"Clear all entries in {config.manifest.path}?"):
        ui.info("Aborted")
        raise typer.Exit(1)

    async def _run():
        async with ManifestStore(config.manifest.path) as store:
            return await store.clear()

    removed = run_async(_run())
    ui.success(f"Removed {removed} manifest entries")
