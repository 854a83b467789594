# hopper/service.py
"""
Service container.

Builds every collaborator from a HopperConfig and exposes the operation
lifecycle used by both the CLI and the HTTP API. Nothing here is a
module-level singleton: tests construct a service with fakes injected.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import AsyncIterator, Awaitable, Iterable, List, Optional, Sequence

import httpx

from hopper.core.config.schema import HopperConfig
from hopper.ingest.batching import EmbeddingBatcher, UpsertBatcher
from hopper.ingest.chunking.plugins.sliding import SlidingWindowChunker
from hopper.ingest.extraction.base import ExtractOptions
from hopper.ingest.extraction.registry import ExtractorRegistry
from hopper.ingest.operations import ItemResult, Operation, OperationRegistry
from hopper.ingest.pipeline import IngestPipeline
from hopper.ingest.resume import ResumeController, ResumePlan, ResumeScope, requeued_files
from hopper.ingest.scheduler import WorkerPool
from hopper.ingest.sources.base import IngestItem
from hopper.ingest.sources.crawler import WebsiteCrawler, validate_seed_url
from hopper.ingest.sources.directory import enumerate_files
from hopper.ingest.state.manager import ManifestStore
from hopper.ingest.state.schema import EntryStatus, ManifestStats
from hopper.llm.embedding.base import EmbeddingPlugin
from hopper.llm.embedding.registry import build_embedding_plugin
from hopper.logging.logger import get_logger
from hopper.logging.tags import INGEST
from hopper.progress.broadcaster import ProgressBroadcaster
from hopper.vector_db.base import VectorIndex
from hopper.vector_db.plugins.qdrant import QdrantVectorIndex

logger = get_logger(__name__)


class HopperService:
    """
    Usage:
        async with HopperService.from_config(load_config()) as service:
            operation = await service.ingest_directory("/data/pdfs")
    """

    def __init__(
        self,
        config: HopperConfig,
        *,
        store: ManifestStore,
        embedding_plugin: EmbeddingPlugin,
        vector_index: VectorIndex,
        broadcaster: Optional[ProgressBroadcaster] = None,
        extractors: Optional[ExtractorRegistry] = None,
        crawler_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self.store = store
        self.embedding_plugin = embedding_plugin
        self.vector_index = vector_index
        self.broadcaster = broadcaster or ProgressBroadcaster()
        self.operations = OperationRegistry(self.broadcaster)
        self._crawler_transport = crawler_transport

        bulk = config.bulk
        self.pipeline = IngestPipeline(
            store=store,
            extractors=extractors or ExtractorRegistry.default(),
            chunker=SlidingWindowChunker(
                chunk_size=bulk.chunk_size, chunk_overlap=bulk.chunk_overlap
            ),
            embedder=EmbeddingBatcher(embedding_plugin, bulk.embed_batch_size, config.retry),
            upserter=UpsertBatcher(vector_index, bulk.upsert_batch_size, config.retry),
            options=ExtractOptions(
                strip_subtitle_timestamps=config.extraction.strip_subtitle_timestamps
            ),
            broadcaster=self.broadcaster,
        )
        self.pool = WorkerPool(self.pipeline, bulk.concurrency, self.broadcaster)
        self.resume_controller = ResumeController(store)

    @classmethod
    def from_config(cls, config: HopperConfig) -> "HopperService":
        vdb = config.vector_db
        return cls(
            config,
            store=ManifestStore(config.manifest.path),
            embedding_plugin=build_embedding_plugin(config.embedding),
            vector_index=QdrantVectorIndex(
                url=vdb.url,
                api_key=vdb.api_key,
                collection=vdb.collection,
                distance=vdb.distance,
            ),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> "HopperService":
        if not self.store.is_open:
            await self.store.open()
        return self

    async def close(self) -> None:
        await self.operations.cancel_all()
        await self.store.close()
        await self.embedding_plugin.aclose()
        await self.vector_index.aclose()

    async def __aenter__(self) -> "HopperService":
        return await self.open()

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _crawler(self, operation: Operation) -> WebsiteCrawler:
        async def notify(message: str) -> None:
            self.broadcaster.progress(operation.operation_id, message)

        return WebsiteCrawler(
            self.config.crawler, transport=self._crawler_transport, notify=notify
        )

    async def _crawl_items(
        self, crawler: WebsiteCrawler, url: str, max_pages: Optional[int]
    ) -> AsyncIterator[IngestItem]:
        async for page in crawler.crawl(url, max_pages):
            yield IngestItem.from_page(page.url, page.title, page.text)

    async def _execute(self, operation: Operation, runner: Awaitable[None]) -> Operation:
        """Run to completion and always publish exactly one `done` event."""
        try:
            await runner
        except asyncio.CancelledError:
            logger.warning(f"{INGEST} Operation {operation.operation_id} cancelled")
            operation.finish("cancelled")
            self.broadcaster.done(operation.operation_id, **operation.summary())
            raise
        except Exception as e:
            logger.error(f"{INGEST} Operation {operation.operation_id} failed: {e}")
            operation.finish(str(e) or type(e).__name__)
            self.broadcaster.done(operation.operation_id, **operation.summary())
            raise

        operation.finish()
        logger.info(
            f"{INGEST} Operation {operation.operation_id} completed: total={operation.total} "
            f"completed={operation.completed} skipped={operation.skipped} "
            f"errors={operation.errors} chunks={operation.chunks_total}"
        )
        self.broadcaster.done(operation.operation_id, **operation.summary())
        return operation

    def _background(self, operation: Operation, coro: Awaitable[Operation]) -> Operation:
        self.operations.attach(operation, asyncio.ensure_future(coro))
        return operation

    # ------------------------------------------------------------------
    # Directory runs
    # ------------------------------------------------------------------

    async def _run_directory(self, operation: Operation, paths: Iterable[Path]) -> None:
        files: List[Path] = await asyncio.to_thread(list, paths)
        await self.pool.run(
            operation, (IngestItem.from_file(p) for p in files), total=len(files)
        )

    async def ingest_directory(
        self,
        directory: str | Path,
        patterns: Optional[Sequence[str]] = None,
        operation: Optional[Operation] = None,
    ) -> Operation:
        paths = enumerate_files(directory, patterns or self.config.bulk.file_patterns)
        operation = operation or self.operations.create("ingest", str(directory))
        return await self._execute(operation, self._run_directory(operation, paths))

    def start_ingest(
        self,
        directory: str | Path,
        patterns: Optional[Sequence[str]] = None,
        operation_id: Optional[str] = None,
    ) -> Operation:
        """Validate the root now, run in the background."""
        paths = enumerate_files(directory, patterns or self.config.bulk.file_patterns)
        operation = self.operations.create("ingest", str(directory), operation_id)
        return self._background(
            operation, self._execute(operation, self._run_directory(operation, paths))
        )

    # ------------------------------------------------------------------
    # Crawl runs
    # ------------------------------------------------------------------

    async def _run_crawl(
        self, operation: Operation, url: str, max_pages: Optional[int]
    ) -> WebsiteCrawler:
        crawler = self._crawler(operation)
        try:
            await self.pool.run(operation, self._crawl_items(crawler, url, max_pages))
        finally:
            operation.details.update(
                pages_processed=crawler.stats.pages_processed,
                total_urls=crawler.stats.total_urls,
            )
        return crawler

    async def crawl_site(
        self,
        url: str,
        max_pages: Optional[int] = None,
        operation: Optional[Operation] = None,
    ) -> Operation:
        seed = validate_seed_url(url)
        operation = operation or self.operations.create("crawl", seed)
        return await self._execute(operation, self._run_crawl(operation, seed, max_pages))

    def start_crawl(
        self,
        url: str,
        max_pages: Optional[int] = None,
        operation_id: Optional[str] = None,
    ) -> Operation:
        seed = validate_seed_url(url)
        operation = self.operations.create("crawl", seed, operation_id)
        return self._background(
            operation, self._execute(operation, self._run_crawl(operation, seed, max_pages))
        )

    # ------------------------------------------------------------------
    # Resume
    # ------------------------------------------------------------------

    def _validate_scope(self, scope: ResumeScope) -> None:
        if scope.directory:
            enumerate_files(scope.directory, self.config.bulk.file_patterns)
        else:
            validate_seed_url(scope.url or "")

    async def _run_resume(
        self, operation: Operation, scope: ResumeScope, max_pages: Optional[int] = None
    ) -> None:
        plan = await self.resume_controller.prepare(scope)
        operation.details["requeued"] = len(plan.requeued)

        complete = True
        if scope.directory:
            paths = enumerate_files(scope.directory, self.config.bulk.file_patterns)
            await self._run_directory(operation, self._resume_paths(plan, paths))
        else:
            seed = validate_seed_url(scope.url or "")
            crawler = await self._run_crawl(operation, seed, max_pages)
            complete = not crawler.stats.capped

        missing = await self.resume_controller.finalize(plan, operation.seen_keys, complete)
        operation.errors += len(missing)
        operation.details["missing"] = len(missing)

    @staticmethod
    def _resume_paths(plan: ResumePlan, paths: Iterable[Path]) -> Iterable[Path]:
        requeued = requeued_files(plan)
        seen = {str(p) for p in requeued}
        yield from requeued
        for path in paths:
            if str(path) not in seen:
                yield path

    async def resume(
        self,
        scope: ResumeScope,
        max_pages: Optional[int] = None,
        operation: Optional[Operation] = None,
    ) -> Operation:
        """
        Resume a directory or crawl scope.

        A crawl scope re-crawls up to `max_pages` (the configured cap when
        omitted). Entries the capped crawl never reached stay queued.
        """
        self._validate_scope(scope)
        operation = operation or self.operations.create("resume", scope.label)
        return await self._execute(operation, self._run_resume(operation, scope, max_pages))

    def start_resume(
        self,
        scope: ResumeScope,
        max_pages: Optional[int] = None,
        operation_id: Optional[str] = None,
    ) -> Operation:
        self._validate_scope(scope)
        operation = self.operations.create("resume", scope.label, operation_id)
        return self._background(
            operation, self._execute(operation, self._run_resume(operation, scope, max_pages))
        )

    # ------------------------------------------------------------------
    # Interactive upload, stats, clear
    # ------------------------------------------------------------------

    async def ingest_upload(
        self, filename: str, data: bytes, content_type: Optional[str] = None
    ) -> ItemResult:
        """
        Process one uploaded document.

        Uploading again is how a failed upload is retried, so an `error`
        entry for the same key is re-queued first.
        """
        item = IngestItem.from_upload(filename, data, content_type)
        existing = await self.store.get(item.key)
        if existing is not None and existing.status is EntryStatus.ERROR:
            await self.store.requeue([item.key])
        return await self.pool.process_one(item)

    async def stats(self) -> ManifestStats:
        return await self.store.stats()

    async def clear(self) -> int:
        return await self.store.clear()


__all__ = ["HopperService"]
