"""
Main hopper CLI module.

Provides the top-level `hopper` command.
"""

from hopper.cli.cli import app

__all__ = ["app"]
