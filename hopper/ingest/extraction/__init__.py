# hopper/ingest/extraction/__init__.py
from .base import ExtractOptions, TextExtractor
from .plugins import ParsedPage, parse_page
from .registry import ExtractorRegistry, normalize_text, normalize_type_hint

__all__ = [
    "ExtractOptions",
    "ExtractorRegistry",
    "ParsedPage",
    "TextExtractor",
    "normalize_text",
    "normalize_type_hint",
    "parse_page",
]
