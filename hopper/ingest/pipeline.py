# hopper/ingest/pipeline.py
"""
Single-item ingestion pipeline.

Orchestrates one source item end to end:
1. Checksum the content
2. Skip if the manifest already records it as completed with that checksum
3. Mark processing
4. Extract text (or take pre-extracted page text)
5. Chunk
6. Embed (batched, with retry)
7. Upsert vector points (batched, with retry)
8. Mark completed with the chunk count

Any per-item failure is recorded on the manifest entry and returned as an
error result. Only StoreIOError escapes: without the manifest the run
cannot continue.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from hopper.exceptions import ExtractionError, StoreIOError
from hopper.ingest.batching import EmbeddingBatcher, UpsertBatcher
from hopper.ingest.chunking.base import Chunk
from hopper.ingest.chunking.plugins.sliding import SlidingWindowChunker
from hopper.ingest.extraction.base import ExtractOptions
from hopper.ingest.extraction.registry import ExtractorRegistry, normalize_text
from hopper.ingest.hashing import compute_point_id
from hopper.ingest.operations import ItemOutcome, ItemResult
from hopper.ingest.sources.base import IngestItem
from hopper.ingest.state.manager import ManifestStore
from hopper.ingest.state.schema import EntryStatus, ManifestEntry, utc_now_iso
from hopper.logging.logger import get_logger
from hopper.logging.tags import CHUNKING, INGEST
from hopper.progress.broadcaster import ProgressBroadcaster
from hopper.vector_db.base import VectorPoint

logger = get_logger(__name__)


def build_payload(item: IngestItem, chunk: Chunk, total_chunks: int, ingested_at: str) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "source": item.key,
        "chunk_index": chunk.index,
        "text": chunk.text,
        "total_chunks": total_chunks,
        "file_type": item.file_type,
        "ingested_at": ingested_at,
    }
    if item.title:
        payload["title"] = item.title
    return payload


class IngestPipeline:
    """
    Usage:
        pipeline = IngestPipeline(
            store=store,
            extractors=ExtractorRegistry.default(),
            chunker=SlidingWindowChunker(chunk_size=500, chunk_overlap=200),
            embedder=EmbeddingBatcher(plugin, batch_size=128),
            upserter=UpsertBatcher(index, batch_size=256),
        )
        result = await pipeline.process(IngestItem.from_file(path), operation_id)
    """

    def __init__(
        self,
        *,
        store: ManifestStore,
        extractors: ExtractorRegistry,
        chunker: SlidingWindowChunker,
        embedder: EmbeddingBatcher,
        upserter: UpsertBatcher,
        options: Optional[ExtractOptions] = None,
        broadcaster: Optional[ProgressBroadcaster] = None,
    ) -> None:
        self._store = store
        self._extractors = extractors
        self._chunker = chunker
        self._embedder = embedder
        self._upserter = upserter
        self._options = options or ExtractOptions()
        self._broadcaster = broadcaster or ProgressBroadcaster()

    @property
    def store(self) -> ManifestStore:
        return self._store

    async def _extract(self, item: IngestItem) -> str:
        if item.is_extracted:
            text = normalize_text(item.text or "")
            if not text:
                raise ExtractionError(f"No readable content at {item.key}")
            return text

        data = await asyncio.to_thread(item.read_bytes)
        return await asyncio.to_thread(self._extractors.extract, data, item.type_hint, self._options)

    async def _checksum(self, item: IngestItem) -> str:
        try:
            return await asyncio.to_thread(item.checksum)
        except OSError as e:
            raise ExtractionError(f"Cannot read {item.key}: {e}") from e

    async def process(self, item: IngestItem, operation_id: Optional[str] = None) -> ItemResult:
        key = item.key
        checksum = ""

        try:
            checksum = await self._checksum(item)
            existing = await self._store.get(key)

            if existing is not None and existing.is_done(checksum):
                logger.debug(f"{INGEST} Unchanged, skipping: {key}")
                return ItemResult(key=key, outcome=ItemOutcome.SKIPPED, chunks=existing.chunks_count)

            if (
                existing is not None
                and existing.status is EntryStatus.ERROR
                and existing.checksum == checksum
            ):
                # Unchanged failures wait for an explicit resume or re-upload.
                logger.debug(f"{INGEST} Previously failed, left for resume: {key}")
                return ItemResult(key=key, outcome=ItemOutcome.ERROR, error=existing.error)

            await self._store.upsert(
                ManifestEntry.create(key, checksum).with_status(EntryStatus.PROCESSING)
            )

            text = await self._extract(item)
            chunks = self._chunker.chunk(key, text)
            if not chunks:
                raise ExtractionError(f"No chunks produced for {key}")
            logger.debug(f"{CHUNKING} {key}: {len(chunks)} chunks")

            name = item.title or key.rsplit("/", 1)[-1]

            async def on_batch(done: int, total: int) -> None:
                self._broadcaster.progress(
                    operation_id,
                    file=name,
                    current_chunk=done,
                    total_chunks=total,
                    status="processing_chunks",
                )

            vectors = await self._embedder.embed([chunk.text for chunk in chunks], on_batch=on_batch)

            ingested_at = utc_now_iso()
            points: List[VectorPoint] = [
                VectorPoint(
                    id=compute_point_id(key, chunk.index),
                    vector=vector,
                    payload=build_payload(item, chunk, len(chunks), ingested_at),
                )
                for chunk, vector in zip(chunks, vectors)
            ]
            await self._upserter.upsert(points)

            await self._store.upsert(
                ManifestEntry.create(key, checksum).with_status(
                    EntryStatus.COMPLETED, chunks_count=len(chunks)
                )
            )
        except StoreIOError:
            raise
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.warning(f"{INGEST} Failed to process {key}: {message}")
            await self._store.upsert(
                ManifestEntry.create(key, checksum).with_status(EntryStatus.ERROR, error=message)
            )
            return ItemResult(key=key, outcome=ItemOutcome.ERROR, error=message)

        logger.info(f"{INGEST} Processed {key} ({len(chunks)} chunks)")
        return ItemResult(key=key, outcome=ItemOutcome.COMPLETED, chunks=len(chunks))


__all__ = ["IngestPipeline", "build_payload"]
