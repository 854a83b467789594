# hopper/ingest/extraction/registry.py
"""
Extractor registry.

Maps a file type (extension or MIME type) to a TextExtractor. The
pipeline only ever calls ExtractorRegistry.extract(); which library
handles a payload is decided here.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from hopper.exceptions import ExtractionError
from hopper.ingest.extraction.base import ExtractOptions, TextExtractor
from hopper.logging.logger import get_logger
from hopper.logging.tags import EXTRACT

logger = get_logger(__name__)


MIME_TYPES: Dict[str, str] = {
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "text/plain": "txt",
    "text/markdown": "md",
    "text/csv": "csv",
    "text/vtt": "vtt",
    "application/x-subrip": "srt",
    "text/html": "html",
}


def normalize_type_hint(type_hint: str) -> str:
    """
    Normalize '.PDF', 'pdf', 'report.pdf' or 'application/pdf' to 'pdf'.

    MIME parameters (e.g. '; charset=utf-8') are ignored.
    """
    hint = (type_hint or "").strip().lower().split(";")[0].strip()
    if hint in MIME_TYPES:
        return MIME_TYPES[hint]
    if "." in hint:
        hint = hint.rsplit(".", 1)[1]
    return hint


def normalize_text(text: str) -> str:
    """CRLF to LF, surrounding whitespace trimmed."""
    return text.replace("\r\n", "\n").strip()


class ExtractorRegistry:
    """
    Registry of extractors keyed by normalized file type.

    Usage:
        registry = ExtractorRegistry.default()
        text = registry.extract(data, "report.pdf", ExtractOptions())
    """

    def __init__(self, extractors: Iterable[TextExtractor] = ()) -> None:
        self._by_type: Dict[str, TextExtractor] = {}
        for extractor in extractors:
            self.register(extractor)

    @classmethod
    def default(cls) -> "ExtractorRegistry":
        from hopper.ingest.extraction.plugins import BUILTIN_EXTRACTORS

        return cls(plugin() for plugin in BUILTIN_EXTRACTORS)

    def register(self, extractor: TextExtractor, *, replace: bool = False) -> None:
        for file_type in extractor.file_types:
            key = normalize_type_hint(file_type)
            if key in self._by_type and not replace:
                raise ValueError(
                    f"Extractor for '{key}' already registered "
                    f"({self._by_type[key].plugin_name})"
                )
            self._by_type[key] = extractor

    def get(self, type_hint: str) -> Optional[TextExtractor]:
        return self._by_type.get(normalize_type_hint(type_hint))

    def supports(self, type_hint: str) -> bool:
        return self.get(type_hint) is not None

    @property
    def file_types(self) -> List[str]:
        return sorted(self._by_type)

    def extract(self, data: bytes, type_hint: str, options: ExtractOptions) -> str:
        """
        Extract plain text from a payload.

        Raises:
            ExtractionError: unsupported type, corrupt or empty payload.
        """
        extractor = self.get(type_hint)
        if extractor is None:
            raise ExtractionError(f"Unsupported content type: {type_hint!r}")
        if not data:
            raise ExtractionError("Empty payload")

        text = normalize_text(extractor.extract(data, options))
        if not text:
            raise ExtractionError(f"No extractable text ({extractor.plugin_name})")

        logger.debug(f"{EXTRACT} {extractor.plugin_name}: {len(data)} bytes -> {len(text)} chars")
        return text


__all__ = ["ExtractorRegistry", "MIME_TYPES", "normalize_text", "normalize_type_hint"]
