# tests/conftest.py
"""Shared fakes and fixtures for the hopper test suite."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import pytest

from hopper.core.config.schema import (
    BulkConfig,
    CrawlerConfig,
    HopperConfig,
    ManifestConfig,
    RetryConfig,
)
from hopper.ingest.state.manager import ManifestStore
from hopper.service import HopperService
from hopper.vector_db.base import VectorPoint


def make_pdf(text: str) -> bytes:
    """Build a minimal single-page PDF whose page shows `text`."""
    stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length " + str(len(stream)).encode() + b" >>\nstream\n" + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_at = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n".encode()
    out += f"startxref\n{xref_at}\n%%EOF\n".encode()
    return bytes(out)


class MockEmbeddingPlugin:
    """Deterministic embedder; can fail a number of times or on matching text."""

    plugin_name = "mock"

    def __init__(self, dim: int = 4, fail_times: int = 0, fail_on: Optional[str] = None):
        self.dim = dim
        self.fail_times = fail_times
        self.fail_on = fail_on
        self.calls: List[List[str]] = []
        self.closed = False
        self.before_embed: Optional[Callable] = None

    async def embed(self, texts: Sequence[str]) -> List[List[float]]:
        self.calls.append(list(texts))
        if self.before_embed is not None:
            await self.before_embed()
        if self.fail_times > 0:
            self.fail_times -= 1
            raise RuntimeError("embedding service unavailable")
        if self.fail_on and any(self.fail_on in t for t in texts):
            raise RuntimeError(f"cannot embed text containing {self.fail_on!r}")
        return [[float(len(t))] + [0.5] * (self.dim - 1) for t in texts]

    async def aclose(self) -> None:
        self.closed = True


class MockVectorIndex:
    """In-memory vector index keyed by point id."""

    plugin_name = "mock"

    def __init__(self, fail_times: int = 0):
        self.fail_times = fail_times
        self.points: Dict[str, VectorPoint] = {}
        self.batches: List[int] = []
        self.dimension: Optional[int] = None
        self.closed = False

    async def ensure_collection(self, dimension: int) -> None:
        self.dimension = dimension

    async def upsert(self, points: Sequence[VectorPoint]) -> None:
        if self.fail_times > 0:
            self.fail_times -= 1
            raise RuntimeError("index unavailable")
        self.batches.append(len(points))
        for point in points:
            self.points[point.id] = point

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fast_retry() -> RetryConfig:
    return RetryConfig(max_attempts=3, initial_delay=0, max_delay=0, jitter=0)


@pytest.fixture
def config(tmp_path: Path, fast_retry: RetryConfig) -> HopperConfig:
    return HopperConfig(
        bulk=BulkConfig(concurrency=4, file_patterns=["*.pdf", "*.txt"]),
        retry=fast_retry,
        crawler=CrawlerConfig(delay_seconds=0),
        manifest=ManifestConfig(path=str(tmp_path / "manifest.db")),
    )


@pytest.fixture
def make_service(config: HopperConfig):
    """Factory for services wired to in-memory fakes. Use with `async with`."""

    def factory(
        embedding_plugin: Optional[MockEmbeddingPlugin] = None,
        vector_index: Optional[MockVectorIndex] = None,
        **kwargs,
    ) -> HopperService:
        return HopperService(
            kwargs.pop("config", config),
            store=ManifestStore(config.manifest.path),
            embedding_plugin=embedding_plugin or MockEmbeddingPlugin(),
            vector_index=vector_index or MockVectorIndex(),
            **kwargs,
        )

    return factory


@pytest.fixture
def pdf_dir(tmp_path: Path) -> Path:
    """10 PDFs, 3 of them corrupt."""
    root = tmp_path / "pdfs"
    (root / "nested").mkdir(parents=True)
    for i in range(7):
        target = root / ("nested" if i % 2 else "") / f"doc{i}.pdf"
        target.write_bytes(make_pdf(f"Document number {i} " + "lorem ipsum dolor sit amet " * 30))
    for i in range(3):
        (root / f"broken{i}.pdf").write_bytes(b"this is not a pdf at all")
    return root


def write_text_files(root: Path, count: int, words: int = 200) -> List[Path]:
    root.mkdir(parents=True, exist_ok=True)
    paths = []
    for i in range(count):
        path = root / f"file{i:02d}.txt"
        path.write_text(f"File {i}. " + "alpha beta gamma delta " * words, encoding="utf-8")
        paths.append(path)
    return paths


async def yield_control() -> None:
    await asyncio.sleep(0)
