# hopper/ingest/hashing.py
"""
Content checksums and deterministic point IDs.

Checksums are a pure function of the bytes: file name and mtime never
participate, so a renamed-but-identical file hashes the same and an
edited file at the same path hashes differently.
"""

from __future__ import annotations

import hashlib
import uuid
from pathlib import Path
from typing import Iterable

READ_BLOCK_SIZE = 1024 * 1024

# Fixed namespace so point IDs are stable across processes and releases.
POINT_NAMESPACE = uuid.UUID("6f1d3c2a-8b4e-5f70-9a61-2c7d0e5b4a93")


def hash_stream(blocks: Iterable[bytes]) -> str:
    """SHA-256 hex digest of a stream of byte blocks."""
    digest = hashlib.sha256()
    for block in blocks:
        digest.update(block)
    return digest.hexdigest()


def _iter_file(path: Path, block_size: int) -> Iterable[bytes]:
    with path.open("rb") as fh:
        while True:
            block = fh.read(block_size)
            if not block:
                return
            yield block


def compute_file_checksum(path: str | Path, block_size: int = READ_BLOCK_SIZE) -> str:
    """Hash a file without loading it into memory."""
    return hash_stream(_iter_file(Path(path), block_size))


def compute_bytes_checksum(data: bytes) -> str:
    return hash_stream([data])


def compute_point_id(source_id: str, chunk_index: int) -> str:
    """
    Deterministic vector point ID for (source_id, chunk_index).

    Returned as a UUID string so it is accepted by Qdrant as-is.
    Re-ingesting the same source overwrites its points instead of
    duplicating them.
    """
    return str(uuid.uuid5(POINT_NAMESPACE, f"{source_id}|{chunk_index}"))


__all__ = [
    "hash_stream",
    "compute_file_checksum",
    "compute_bytes_checksum",
    "compute_point_id",
]
