# hopper/ingest/operations.py
"""
Operation descriptors and the registry of background runs.

Each background run is an asyncio task tracked under its operation id.
A done-callback routes any failure to the progress topic, so a crashed
run always ends with a `done` event instead of vanishing.
"""

from __future__ import annotations

import asyncio
import os
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set
from urllib.parse import urlsplit

from hopper.exceptions import OperationConflictError
from hopper.ingest.state.schema import utc_now_iso
from hopper.logging.logger import get_logger
from hopper.logging.tags import INGEST
from hopper.progress.broadcaster import ProgressBroadcaster

logger = get_logger(__name__)


class OperationStatus(str, Enum):
    STARTING = "starting"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ItemOutcome(str, Enum):
    COMPLETED = "completed"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass(frozen=True)
class ItemResult:
    key: str
    outcome: ItemOutcome
    chunks: int = 0
    error: Optional[str] = None


@dataclass
class Operation:
    """Aggregate counters for one run. Lives only in memory."""

    operation_id: str
    kind: str = "ingest"
    scope: str = ""
    status: OperationStatus = OperationStatus.STARTING
    total: int = 0
    completed: int = 0
    skipped: int = 0
    errors: int = 0
    chunks_total: int = 0
    error: Optional[str] = None
    started_at: str = field(default_factory=utc_now_iso)
    finished_at: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    seen_keys: Set[str] = field(default_factory=set, repr=False)

    @property
    def processed(self) -> int:
        return self.completed + self.skipped + self.errors

    @property
    def is_finished(self) -> bool:
        return self.status in (OperationStatus.COMPLETED, OperationStatus.FAILED)

    def record(self, result: ItemResult) -> None:
        self.seen_keys.add(result.key)
        if result.outcome is ItemOutcome.COMPLETED:
            self.completed += 1
            self.chunks_total += result.chunks
        elif result.outcome is ItemOutcome.SKIPPED:
            self.skipped += 1
        else:
            self.errors += 1

    def finish(self, error: Optional[str] = None) -> None:
        self.status = OperationStatus.FAILED if error else OperationStatus.COMPLETED
        self.error = error
        self.finished_at = utc_now_iso()

    def snapshot(self) -> Dict[str, Any]:
        return {
            "operation_id": self.operation_id,
            "kind": self.kind,
            "scope": self.scope,
            "status": self.status.value,
            "total": self.total,
            "completed": self.completed,
            "skipped": self.skipped,
            "errors": self.errors,
            "chunks_total": self.chunks_total,
            "error": self.error,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            **self.details,
        }

    def summary(self) -> Dict[str, Any]:
        """Terminal payload for the `done` event."""
        data = {
            "total_files": self.total,
            "completed": self.completed,
            "skipped": self.skipped,
            "errors": self.errors,
            "total_chunks": self.chunks_total,
            "status": self.status.value,
        }
        data.update(self.details)
        if self.error:
            data["error"] = self.error
        return data


def _is_url(scope: str) -> bool:
    return urlsplit(scope).scheme in ("http", "https")


def scopes_overlap(a: str, b: str) -> bool:
    """
    Whether two runs could touch the same manifest keys.

    Directory scopes overlap when one contains the other; crawl scopes
    overlap on the same host.
    """
    if not a or not b:
        return False
    if _is_url(a) or _is_url(b):
        return _is_url(a) and _is_url(b) and urlsplit(a).hostname == urlsplit(b).hostname
    a, b = os.path.abspath(os.path.expanduser(a)), os.path.abspath(os.path.expanduser(b))
    return os.path.commonpath([a, b]) in (a, b)


def new_operation_id() -> str:
    return f"op-{uuid.uuid4().hex[:12]}"


class OperationRegistry:
    """Operation descriptors and task handles keyed by operation id."""

    def __init__(self, broadcaster: ProgressBroadcaster) -> None:
        self._broadcaster = broadcaster
        self._operations: Dict[str, Operation] = {}
        self._tasks: Dict[str, asyncio.Task] = {}

    def create(self, kind: str, scope: str, operation_id: Optional[str] = None) -> Operation:
        operation_id = operation_id or new_operation_id()
        if self.is_running(operation_id):
            raise OperationConflictError(f"Operation '{operation_id}' is already running")
        for other in self.active():
            if scopes_overlap(scope, other.scope):
                raise OperationConflictError(
                    f"Operation '{other.operation_id}' is already running on {other.scope}"
                )
        operation = Operation(operation_id=operation_id, kind=kind, scope=scope)
        self._operations[operation_id] = operation
        return operation

    def get(self, operation_id: str) -> Optional[Operation]:
        return self._operations.get(operation_id)

    def list(self) -> List[Operation]:
        return list(self._operations.values())

    def active(self) -> List[Operation]:
        """Operations that have been created and not yet finished."""
        return [op for op in self._operations.values() if not op.is_finished]

    def is_running(self, operation_id: str) -> bool:
        task = self._tasks.get(operation_id)
        return task is not None and not task.done()

    def attach(self, operation: Operation, task: asyncio.Task) -> asyncio.Task:
        """Track a background task and route its failure to the progress topic."""
        self._tasks[operation.operation_id] = task
        task.add_done_callback(lambda t: self._on_task_done(operation, t))
        return task

    def _on_task_done(self, operation: Operation, task: asyncio.Task) -> None:
        if task.cancelled():
            if not operation.is_finished:
                operation.finish("cancelled")
                self._broadcaster.done(operation.operation_id, **operation.summary())
            return

        exc = task.exception()
        if exc is not None and not operation.is_finished:
            logger.error(f"{INGEST} Operation {operation.operation_id} crashed: {exc!r}")
            operation.finish(str(exc) or type(exc).__name__)
            self._broadcaster.done(operation.operation_id, **operation.summary())

    async def wait(self, operation_id: str) -> Optional[Operation]:
        task = self._tasks.get(operation_id)
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)
        return self.get(operation_id)

    async def cancel_all(self) -> None:
        pending = [task for task in self._tasks.values() if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)


__all__ = [
    "ItemOutcome",
    "ItemResult",
    "Operation",
    "OperationRegistry",
    "OperationStatus",
    "new_operation_id",
    "scopes_overlap",
]
