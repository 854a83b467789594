# hopper/ingest/extraction/plugins/word.py
from __future__ import annotations

import io
from dataclasses import dataclass, field

from docx import Document

from hopper.exceptions import ExtractionError
from hopper.ingest.extraction.base import ExtractOptions


@dataclass
class DocxExtractor:
    """Paragraph and table text from Word documents."""

    plugin_name: str = field(default="docx", repr=False)
    file_types: tuple[str, ...] = ("docx",)

    def extract(self, data: bytes, options: ExtractOptions) -> str:
        try:
            doc = Document(io.BytesIO(data))
        except Exception as e:
            raise ExtractionError(f"Corrupt or unreadable DOCX: {e}") from e

        parts = [p.text.strip() for p in doc.paragraphs if p.text.strip()]

        for table in doc.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    parts.append(" | ".join(cells))

        if not parts:
            raise ExtractionError("No text extracted from DOCX")
        return "\n".join(parts)
