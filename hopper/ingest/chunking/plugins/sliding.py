# hopper/ingest/chunking/plugins/sliding.py
"""
Sliding-window chunker.

Fixed-size character windows with overlap. The output is a pure function
of (text, chunk_size, chunk_overlap), which keeps vector point IDs stable
across re-runs.

Chunker ID format: "sliding:{chunk_size}:{chunk_overlap}"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from hopper.ingest.chunking.base import Chunk


def split_text(text: str, size: int, overlap: int) -> List[str]:
    """
    Split text into overlapping windows.

    Each window text[start:start+size] is trimmed and kept if non-empty.
    After a window that did not reach the end, the next one starts at
    end - overlap.

    >>> [len(c) for c in split_text("a" * 1205, 500, 200)]
    [500, 500, 500, 305]
    """
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")
    if not 0 <= overlap < size:
        raise ValueError(f"overlap ({overlap}) must be >= 0 and < size ({size})")

    pieces: List[str] = []
    length = len(text)
    start = 0

    while start < length:
        end = min(start + size, length)
        piece = text[start:end].strip()
        if piece:
            pieces.append(piece)
        if end == length:
            break
        start = max(end - overlap, 0)

    return pieces


@dataclass
class SlidingWindowChunker:
    """
    Fixed-size chunker with overlap.

    Example:
        >>> chunker = SlidingWindowChunker(chunk_size=500, chunk_overlap=200)
        >>> chunks = chunker.chunk("/data/report.pdf", text)
    """

    plugin_name: str = field(default="sliding", repr=False)
    chunk_size: int = 500
    chunk_overlap: int = 200

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size}")
        if self.chunk_overlap < 0:
            raise ValueError(f"chunk_overlap must be >= 0, got {self.chunk_overlap}")
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be < chunk_size ({self.chunk_size})"
            )

    @property
    def chunker_id(self) -> str:
        """Unique identifier for this chunker configuration."""
        return f"{self.plugin_name}:{self.chunk_size}:{self.chunk_overlap}"

    def chunk(self, source_id: str, text: str) -> List[Chunk]:
        if not text or not text.strip():
            return []

        return [
            Chunk(source_id=source_id, index=i, text=piece)
            for i, piece in enumerate(split_text(text, self.chunk_size, self.chunk_overlap))
        ]


__all__ = ["SlidingWindowChunker", "split_text"]
