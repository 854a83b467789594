# hopper/cli/cli.py
"""
Main hopper CLI.

Commands:
    hopper ingest DIR        Bulk-ingest a directory
    hopper crawl URL         Crawl and ingest a website
    hopper resume --dir/--url
    hopper stats             Manifest totals
    hopper clear             Wipe the manifest
    hopper serve             Start the HTTP API
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from hopper import __version__
from hopper.cli.commands import clear, crawl, ingest, resume, serve, stats
from hopper.cli.context import CLIContext
from hopper.cli.ui import ui
from hopper.exceptions import ConfigError
from hopper.logging.logger import configure_logging

app = typer.Typer(
    help="hopper: resumable bulk ingestion into a vector index",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hopper {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="User config YAML merged over the defaults."
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", "-l", help="DEBUG, INFO, WARNING or ERROR."
    ),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version."
    ),
) -> None:
    cli_ctx = CLIContext(config_path=config, log_level=log_level)
    try:
        level = log_level or cli_ctx.config.logging.level
    except ConfigError as e:
        ui.error(str(e))
        raise typer.Exit(1)
    configure_logging(level)
    ctx.obj = cli_ctx


app.command("ingest")(ingest.command)
app.command("crawl")(crawl.command)
app.command("resume")(resume.command)
app.command("stats")(stats.command)
app.command("clear")(clear.command)
app.command("serve")(serve.command)
