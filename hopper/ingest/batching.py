# hopper/ingest/batching.py
"""
Batched calls to the embedding service and the vector index.

Both batchers share one retry policy (exponential backoff with jitter,
via tenacity). Retry exhaustion surfaces as an item-level error so the
enclosing pipeline marks only that item as failed.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Iterator, List, Optional, Sequence, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from hopper.core.config.schema import RetryConfig
from hopper.exceptions import EmbeddingError, UpsertError
from hopper.llm.embedding.base import EmbeddingPlugin
from hopper.logging.logger import get_logger
from hopper.logging.tags import EMBEDDING, VECTOR_DB
from hopper.vector_db.base import VectorIndex, VectorPoint

logger = get_logger(__name__)

T = TypeVar("T")

# Called after each embedded batch with (embedded_so_far, total).
BatchCallback = Callable[[int, int], Awaitable[None]]


def batched(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of at most `size` items."""
    if size < 1:
        raise ValueError(f"batch size must be >= 1, got {size}")
    for start in range(0, len(items), size):
        yield items[start : start + size]


def build_retrying(config: RetryConfig) -> AsyncRetrying:
    """Fresh tenacity controller for one batch call."""
    return AsyncRetrying(
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_exponential(multiplier=config.initial_delay, max=config.max_delay, exp_base=2)
        + wait_random(0, config.jitter),
        retry=retry_if_exception_type(Exception),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


class EmbeddingBatcher:
    """
    Embed chunk texts in batches of `batch_size`.

    All-or-nothing per call: if any batch exhausts its retries the vectors
    already computed are discarded and EmbeddingError is raised.
    """

    def __init__(
        self,
        plugin: EmbeddingPlugin,
        batch_size: int = 128,
        retry: Optional[RetryConfig] = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self._plugin = plugin
        self._batch_size = batch_size
        self._retry = retry or RetryConfig()

    @property
    def batch_size(self) -> int:
        return self._batch_size

    async def _embed_batch(self, batch: Sequence[str]) -> List[List[float]]:
        return await build_retrying(self._retry)(self._plugin.embed, batch)

    async def embed(
        self,
        texts: Sequence[str],
        on_batch: Optional[BatchCallback] = None,
    ) -> List[List[float]]:
        vectors: List[List[float]] = []

        for batch in batched(texts, self._batch_size):
            try:
                result = await self._embed_batch(batch)
            except Exception as e:
                raise EmbeddingError(
                    f"Embedding failed after {self._retry.max_attempts} attempts: {e}"
                ) from e

            if len(result) != len(batch):
                raise EmbeddingError(
                    f"Embedding service returned {len(result)} vectors for {len(batch)} texts"
                )
            vectors.extend(result)

            if on_batch is not None:
                await on_batch(len(vectors), len(texts))

        logger.debug(f"{EMBEDDING} Embedded {len(texts)} texts")
        return vectors


class UpsertBatcher:
    """Send VectorPoints to the index in batches of `batch_size`."""

    def __init__(
        self,
        index: VectorIndex,
        batch_size: int = 256,
        retry: Optional[RetryConfig] = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self._index = index
        self._batch_size = batch_size
        self._retry = retry or RetryConfig()

    @property
    def batch_size(self) -> int:
        return self._batch_size

    async def _upsert_batch(self, batch: Sequence[VectorPoint]) -> None:
        await build_retrying(self._retry)(self._index.upsert, batch)

    async def upsert(self, points: Sequence[VectorPoint]) -> int:
        """Upsert all points; returns the number acknowledged."""
        if not points:
            return 0

        try:
            await self._index.ensure_collection(len(points[0].vector))
        except Exception as e:
            raise UpsertError(f"Could not prepare vector collection: {e}") from e

        for batch in batched(points, self._batch_size):
            try:
                await self._upsert_batch(batch)
            except Exception as e:
                raise UpsertError(
                    f"Upsert failed after {self._retry.max_attempts} attempts: {e}"
                ) from e

        logger.debug(f"{VECTOR_DB} Upserted {len(points)} points")
        return len(points)


__all__ = ["BatchCallback", "EmbeddingBatcher", "UpsertBatcher", "batched", "build_retrying"]
