# hopper/cli/ui/console.py
"""
Shared Rich console and status glyphs.

Glyphs fall back to ASCII on legacy Windows consoles.
"""

from __future__ import annotations

import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

UNICODE_OK = sys.platform != "win32" or (sys.stdout.encoding or "").lower() in ("utf-8", "utf8")


def _glyph(fancy: str, plain: str) -> str:
    return fancy if UNICODE_OK else plain


CHECK = _glyph("✓", "[OK]")
CROSS = _glyph("✗", "[X]")
WARN = _glyph("⚠", "[!]")
SKIP = _glyph("↷", "[=]")

# Manifest status -> (glyph, style)
STATUS_MARKS = {
    "completed": (CHECK, "green"),
    "skipped": (SKIP, "dim"),
    "error": (CROSS, "red"),
}

console = Console()

__all__ = ["CHECK", "CROSS", "SKIP", "STATUS_MARKS", "UNICODE_OK", "WARN", "Panel", "Table", "console"]
