# hopper/vector_db/base.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class VectorPoint:
    """
    One embedded chunk ready for the index.

    `id` is derived from (source_id, chunk_index), so re-ingesting the same
    chunk overwrites the previous point instead of duplicating it.
    """

    id: str
    vector: List[float]
    payload: Dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class VectorIndex(Protocol):
    """Minimal write-side contract of an external vector index."""

    plugin_name: str

    async def ensure_collection(self, dimension: int) -> None:
        ...

    async def upsert(self, points: Sequence[VectorPoint]) -> None:
        ...

    async def aclose(self) -> None:
        ...


__all__ = ["VectorIndex", "VectorPoint"]
