# hopper/ingest/scheduler.py
"""
Bounded worker pool.

Each run feeds its workers from a small queue filled in discovery order
by a producer task, so a source with thousands of entries never runs far
ahead of the workers. Every run and every upload shares one set of N
slots: however many operations are active, at most N items are inside
the pipeline at once. A worker releases its slot whatever the item's
outcome.
"""

from __future__ import annotations

import asyncio
from typing import AsyncIterable, Iterable, Optional, Union

from hopper.ingest.operations import ItemOutcome, ItemResult, Operation, OperationStatus
from hopper.ingest.pipeline import IngestPipeline
from hopper.ingest.sources.base import IngestItem
from hopper.logging.logger import get_logger
from hopper.logging.tags import INGEST
from hopper.progress.broadcaster import ProgressBroadcaster

logger = get_logger(__name__)

ItemSource = Union[Iterable[IngestItem], AsyncIterable[IngestItem]]

_STOP = object()


async def _aiter(items: ItemSource):
    if hasattr(items, "__aiter__"):
        async for item in items:
            yield item
    else:
        for item in items:
            yield item


class WorkerPool:
    """
    Usage:
        pool = WorkerPool(pipeline, concurrency=6, broadcaster=broadcaster)
        await pool.run(operation, items)
    """

    def __init__(
        self,
        pipeline: IngestPipeline,
        concurrency: int = 6,
        broadcaster: Optional[ProgressBroadcaster] = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self._pipeline = pipeline
        self._concurrency = concurrency
        self._slots = asyncio.Semaphore(concurrency)
        self._broadcaster = broadcaster or ProgressBroadcaster()

    @property
    def concurrency(self) -> int:
        return self._concurrency

    async def process_one(self, item: IngestItem, operation_id: Optional[str] = None) -> ItemResult:
        """Run one item through the pipeline once a shared slot is free."""
        async with self._slots:
            return await self._pipeline.process(item, operation_id)

    def _publish_item(self, operation: Operation, item: IngestItem, result: ItemResult) -> None:
        fields = {
            "total_files": operation.total,
            "current_file": operation.processed,
            "completed": operation.completed,
            "skipped": operation.skipped,
            "errors": operation.errors,
            "total_chunks": operation.chunks_total,
            "current_file_name": item.title or item.key.rsplit("/", 1)[-1],
            "status": "error" if result.outcome is ItemOutcome.ERROR else "processing",
        }
        if result.error:
            fields["error"] = result.error
        self._broadcaster.progress(operation.operation_id, **fields)

    async def _produce(
        self,
        operation: Operation,
        items: ItemSource,
        queue: asyncio.Queue,
        count_total: bool,
    ) -> None:
        async for item in _aiter(items):
            if count_total:
                operation.total += 1
            await queue.put(item)
        for _ in range(self._concurrency):
            await queue.put(_STOP)

    async def _work(self, operation: Operation, queue: asyncio.Queue) -> None:
        while True:
            item = await queue.get()
            if item is _STOP:
                return
            result = await self.process_one(item, operation.operation_id)
            operation.record(result)
            self._publish_item(operation, item, result)

    async def run(
        self,
        operation: Operation,
        items: ItemSource,
        total: Optional[int] = None,
    ) -> Operation:
        """
        Drive every item through the pipeline.

        `total` may be given when the item count is known up front;
        otherwise it grows as items are discovered.

        Raises:
            StoreIOError: the manifest failed; remaining workers are cancelled.
        """
        operation.status = OperationStatus.PROCESSING
        if total is not None:
            operation.total = total

        self._broadcaster.progress(
            operation.operation_id,
            total_files=operation.total,
            current_file=0,
            status="starting",
        )
        logger.info(
            f"{INGEST} Operation {operation.operation_id} started "
            f"({operation.kind} {operation.scope}, concurrency={self._concurrency})"
        )

        queue: asyncio.Queue = asyncio.Queue(maxsize=self._concurrency)
        tasks = [
            asyncio.create_task(self._produce(operation, items, queue, total is None)),
            *(asyncio.create_task(self._work(operation, queue)) for _ in range(self._concurrency)),
        ]

        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
            failed = next((t for t in done if not t.cancelled() and t.exception()), None)
            if failed is not None:
                for task in pending:
                    task.cancel()
                await asyncio.gather(*pending, return_exceptions=True)
                raise failed.exception()
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return operation


__all__ = ["ItemSource", "WorkerPool"]
