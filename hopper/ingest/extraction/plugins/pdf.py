# hopper/ingest/extraction/plugins/pdf.py
from __future__ import annotations

import io
from dataclasses import dataclass, field

from pypdf import PdfReader

from hopper.exceptions import ExtractionError
from hopper.ingest.extraction.base import ExtractOptions


@dataclass
class PdfExtractor:
    """Page text from PDF documents via pypdf."""

    plugin_name: str = field(default="pdf", repr=False)
    file_types: tuple[str, ...] = ("pdf",)

    def extract(self, data: bytes, options: ExtractOptions) -> str:
        try:
            reader = PdfReader(io.BytesIO(data))
            pages = [page.extract_text() or "" for page in reader.pages]
        except Exception as e:
            raise ExtractionError(f"Corrupt or unreadable PDF: {e}") from e

        text = "\n".join(p for p in pages if p.strip())
        if not text.strip():
            raise ExtractionError("No text extracted from PDF")
        return text
