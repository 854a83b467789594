# hopper/ingest/extraction/base.py
"""
Base types for content extractors.

An extractor turns raw bytes of one format into plain text. Extractors
are registered per file type in ExtractorRegistry; adding a format means
registering a new extractor, not branching the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ExtractOptions:
    """Options forwarded to every extractor."""

    strip_subtitle_timestamps: bool = True


@runtime_checkable
class TextExtractor(Protocol):
    """
    Protocol for format-specific extractors.

    Implementations raise ExtractionError for corrupt or empty payloads.
    """

    plugin_name: str
    file_types: tuple[str, ...]

    def extract(self, data: bytes, options: ExtractOptions) -> str:
        ...


def decode_text(data: bytes) -> str:
    """Decode text payloads, tolerating a UTF-8 BOM and stray bytes."""
    return data.decode("utf-8-sig", errors="replace")


__all__ = ["ExtractOptions", "TextExtractor", "decode_text"]
