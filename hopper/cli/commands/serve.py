# hopper/cli/commands/serve.py
"""
API server command.

Usage:
    hopper serve              # Start on default port 8000
    hopper serve --port 3000  # Custom port
    hopper serve --host 0.0.0.0
"""

from __future__ import annotations

import typer
import uvicorn

from hopper.api import create_app
from hopper.cli import context
from hopper.cli.ui import ui
from hopper.logging.logger import get_logger

logger = get_logger(__name__)


def command(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Host to bind to."),
    port: int = typer.Option(8000, "--port", "-p", help="Port to listen on."),
) -> None:
    """
    Start the hopper API server.

    Once running, visit http://localhost:8000/docs for interactive docs.
    """
    config = context.CLIContext.from_typer(ctx).config

    ui.header("hopper API server", f"http://{host}:{port}")
    ui.info(f"API docs: http://{host}:{port}/docs")
    ui.info("Press Ctrl+C to stop")

    app = create_app(context.build_service(config))
    uvicorn.run(app, host=host, port=port, log_level=config.logging.level.lower())
