# hopper/ingest/extraction/plugins/__init__.py
from .csv_rows import CsvExtractor
from .html import HtmlExtractor, ParsedPage, parse_page
from .pdf import PdfExtractor
from .subtitle import SrtExtractor, VttExtractor
from .text import MarkdownExtractor, PlainTextExtractor
from .word import DocxExtractor

BUILTIN_EXTRACTORS = (
    PdfExtractor,
    DocxExtractor,
    PlainTextExtractor,
    MarkdownExtractor,
    CsvExtractor,
    VttExtractor,
    SrtExtractor,
    HtmlExtractor,
)

__all__ = [
    "BUILTIN_EXTRACTORS",
    "PdfExtractor",
    "DocxExtractor",
    "PlainTextExtractor",
    "MarkdownExtractor",
    "CsvExtractor",
    "VttExtractor",
    "SrtExtractor",
    "HtmlExtractor",
    "ParsedPage",
    "parse_page",
]
