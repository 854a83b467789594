# hopper/ingest/extraction/plugins/csv_rows.py
"""
CSV extractor.

Rows are flattened into " | "-joined lines so that the embedded text
reads as records rather than raw CSV syntax.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field

from hopper.exceptions import ExtractionError
from hopper.ingest.extraction.base import ExtractOptions, decode_text

FIELD_DELIMITER = " | "


@dataclass
class CsvExtractor:
    plugin_name: str = field(default="csv", repr=False)
    file_types: tuple[str, ...] = ("csv",)

    def extract(self, data: bytes, options: ExtractOptions) -> str:
        reader = csv.reader(io.StringIO(decode_text(data)))
        lines = []
        try:
            for row in reader:
                fields = [f.strip() for f in row]
                if any(fields):
                    lines.append(FIELD_DELIMITER.join(fields))
        except csv.Error as e:
            raise ExtractionError(f"Malformed CSV: {e}") from e

        if not lines:
            raise ExtractionError("Empty CSV payload")
        return "\n".join(lines)
