# hopper/cli/utils.py
"""Helpers shared by CLI commands."""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import Awaitable, TypeVar

import typer

from hopper.cli.ui import ui
from hopper.exceptions import HopperError
from hopper.logging.logger import get_logger
from hopper.logging.tags import CLI
from hopper.progress.broadcaster import ProgressBroadcaster

logger = get_logger(__name__)

T = TypeVar("T")

# Grace period for the renderer to drain the final `done` event.
DRAIN_SECONDS = 1.0


async def follow(
    broadcaster: ProgressBroadcaster,
    operation_id: str,
    runner: Awaitable[T],
    description: str,
) -> T:
    """Await `runner` while rendering its progress topic."""
    sub = broadcaster.subscribe(operation_id)

    with ui.operation_progress(description) as view:

        async def render() -> None:
            while True:
                event = await sub.get()
                view.handle(event)
                if event.is_done:
                    return

        watcher = asyncio.create_task(render())
        try:
            return await runner
        finally:
            await asyncio.wait({watcher}, timeout=DRAIN_SECONDS)
            watcher.cancel()
            broadcaster.unsubscribe(sub)


# Conventional exit status for a process ended by SIGTERM.
SIGTERM_EXIT = 128 + signal.SIGTERM


async def _cancel_on_sigterm(coro: Awaitable[T]) -> T:
    task = asyncio.ensure_future(coro)
    if sys.platform == "win32":
        return await task

    loop = asyncio.get_running_loop()
    loop.add_signal_handler(signal.SIGTERM, task.cancel)
    try:
        return await task
    finally:
        loop.remove_signal_handler(signal.SIGTERM)


def run_async(coro: Awaitable[T]) -> T:
    """
    Run a coroutine; HopperErrors become a clean exit code 1.

    SIGTERM cancels the coroutine, so `async with` blocks inside it close
    the manifest before the process exits.
    """
    try:
        return asyncio.run(_cancel_on_sigterm(coro))
    except HopperError as e:
        logger.debug(f"{CLI} {type(e).__name__}: {e}")
        ui.error(str(e))
        raise typer.Exit(1)
    except asyncio.CancelledError:
        logger.warning(f"{CLI} Terminated, run cancelled")
        ui.error("Terminated")
        raise typer.Exit(SIGTERM_EXIT)


__all__ = ["follow", "run_async"]
