# hopper/ingest/chunking/base.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Chunk:
    """A text span produced by a chunker, ordered within its source."""

    source_id: str
    index: int
    text: str

    @property
    def length(self) -> int:
        return len(self.text)


__all__ = ["Chunk"]
