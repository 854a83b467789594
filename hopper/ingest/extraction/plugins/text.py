# hopper/ingest/extraction/plugins/text.py
from __future__ import annotations

from dataclasses import dataclass, field

from hopper.exceptions import ExtractionError
from hopper.ingest.extraction.base import ExtractOptions, decode_text


@dataclass
class PlainTextExtractor:
    plugin_name: str = field(default="text", repr=False)
    file_types: tuple[str, ...] = ("txt", "text")

    def extract(self, data: bytes, options: ExtractOptions) -> str:
        text = decode_text(data)
        if not text.strip():
            raise ExtractionError(f"Empty {self.plugin_name} payload")
        return text


@dataclass
class MarkdownExtractor(PlainTextExtractor):
    """Markdown is indexed verbatim; headings and emphasis carry meaning."""

    plugin_name: str = field(default="markdown", repr=False)
    file_types: tuple[str, ...] = ("md", "markdown")
