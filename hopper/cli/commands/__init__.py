# hopper/cli/commands/__init__.py
"""CLI commands."""

from hopper.cli.commands import clear, crawl, ingest, resume, serve, stats

__all__ = ["clear", "crawl", "ingest", "resume", "serve", "stats"]
