# hopper/ingest/sources/base.py
"""
Source items fed into the ingestion pipeline.

An item carries its manifest key plus whatever is needed to produce
bytes (files, uploads) or already-extracted text (crawled pages).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from hopper.ingest.extraction.registry import normalize_type_hint
from hopper.ingest.hashing import compute_bytes_checksum, compute_file_checksum

UPLOAD_SCHEME = "upload://"


@dataclass(frozen=True)
class IngestItem:
    key: str
    type_hint: str
    title: Optional[str] = None
    path: Optional[Path] = field(default=None, repr=False)
    data: Optional[bytes] = field(default=None, repr=False)
    text: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_file(cls, path: str | Path) -> "IngestItem":
        path = Path(path)
        return cls(key=str(path), type_hint=path.suffix, path=path)

    @classmethod
    def from_page(cls, url: str, title: str, text: str) -> "IngestItem":
        return cls(key=url, type_hint="html", title=title, text=text)

    @classmethod
    def from_upload(cls, filename: str, data: bytes, content_type: str | None = None) -> "IngestItem":
        hint = filename if "." in filename else (content_type or filename)
        return cls(key=f"{UPLOAD_SCHEME}{filename}", type_hint=hint, title=filename, data=data)

    @property
    def is_extracted(self) -> bool:
        """True when the item already carries plain text."""
        return self.text is not None

    @property
    def file_type(self) -> str:
        return normalize_type_hint(self.type_hint)

    def checksum(self) -> str:
        """Content hash. Files are streamed from disk."""
        if self.path is not None:
            return compute_file_checksum(self.path)
        if self.data is not None:
            return compute_bytes_checksum(self.data)
        return compute_bytes_checksum((self.text or "").encode("utf-8"))

    def read_bytes(self) -> bytes:
        if self.path is not None:
            return self.path.read_bytes()
        return self.data or b""


__all__ = ["IngestItem", "UPLOAD_SCHEME"]
