# hopper/vector_db/plugins/qdrant.py
"""
Qdrant vector index plugin.

Features:
- Creates the collection on first use with the detected vector dimension
- Caches collection existence so the check runs once per process
- Waits for upserts to be applied before acknowledging a batch
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

from qdrant_client import AsyncQdrantClient
from qdrant_client.models import Distance, PointStruct, VectorParams

from hopper.exceptions import ConfigError
from hopper.logging.logger import get_logger
from hopper.logging.tags import VECTOR_DB
from hopper.vector_db.base import VectorPoint

logger = get_logger(__name__)

DISTANCES: Dict[str, Distance] = {
    "cosine": Distance.COSINE,
    "dot": Distance.DOT,
    "euclid": Distance.EUCLID,
    "manhattan": Distance.MANHATTAN,
}


@dataclass
class QdrantVectorIndex:
    """
    Write-side Qdrant client for a single collection.

    Usage:
        index = QdrantVectorIndex(url="http://localhost:6333", collection="documents")
        await index.ensure_collection(768)
        await index.upsert(points)
    """

    plugin_name: str = "qdrant"

    url: str = "http://localhost:6333"
    api_key: Optional[str] = None
    collection: str = "documents"
    distance: str = "cosine"
    timeout: int = 30
    client: Any = field(default=None, repr=False)

    _ready_dimension: Optional[int] = field(init=False, repr=False, default=None)
    _lock: asyncio.Lock = field(init=False, repr=False, default_factory=asyncio.Lock)

    def __post_init__(self) -> None:
        if self.distance not in DISTANCES:
            raise ConfigError(
                f"Unknown distance '{self.distance}'. Available: {', '.join(sorted(DISTANCES))}"
            )
        if self.client is None:
            self.client = AsyncQdrantClient(url=self.url, api_key=self.api_key, timeout=self.timeout)

    async def ensure_collection(self, dimension: int) -> None:
        """Create the collection if it does not exist yet."""
        if self._ready_dimension is not None:
            return

        async with self._lock:
            if self._ready_dimension is not None:
                return

            if not await self.client.collection_exists(self.collection):
                logger.info(
                    f"{VECTOR_DB} Creating collection '{self.collection}' "
                    f"(dim={dimension}, distance={self.distance})"
                )
                await self.client.create_collection(
                    collection_name=self.collection,
                    vectors_config=VectorParams(size=dimension, distance=DISTANCES[self.distance]),
                )
            self._ready_dimension = dimension

    async def upsert(self, points: Sequence[VectorPoint]) -> None:
        if not points:
            return

        await self.client.upsert(
            collection_name=self.collection,
            points=[
                PointStruct(id=point.id, vector=point.vector, payload=point.payload)
                for point in points
            ],
            wait=True,
        )
        logger.debug(f"{VECTOR_DB} Upserted {len(points)} points to '{self.collection}'")

    async def aclose(self) -> None:
        await self.client.close()
