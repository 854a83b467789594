# hopper/ingest/state/schema.py
"""
Manifest record types.

One ManifestEntry per source item, keyed by normalized file path or
canonical URL.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class EntryStatus(str, Enum):
    """Lifecycle: queued -> processing -> completed | error."""

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


PENDING_STATUSES = (EntryStatus.QUEUED, EntryStatus.PROCESSING)
RESUMABLE_STATUSES = (EntryStatus.QUEUED, EntryStatus.PROCESSING, EntryStatus.ERROR)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ManifestEntry:
    """Durable per-item state."""

    path: str  # item key: normalized path or canonical URL
    checksum: str
    status: EntryStatus
    error: Optional[str] = None
    chunks_count: int = 0
    updated_at: str = ""

    def is_done(self, checksum: str) -> bool:
        """Completed with the same content: nothing to do."""
        return self.status is EntryStatus.COMPLETED and self.checksum == checksum

    def with_status(
        self,
        status: EntryStatus,
        *,
        error: Optional[str] = None,
        chunks_count: int = 0,
    ) -> "ManifestEntry":
        return replace(
            self,
            status=status,
            error=error,
            chunks_count=chunks_count,
            updated_at=utc_now_iso(),
        )

    @classmethod
    def create(cls, path: str, checksum: str, status: EntryStatus = EntryStatus.QUEUED) -> "ManifestEntry":
        return cls(path=path, checksum=checksum, status=status, updated_at=utc_now_iso())


@dataclass(frozen=True)
class ManifestStats:
    """Aggregate view of the manifest."""

    total: int = 0
    completed: int = 0
    errors: int = 0
    pending: int = 0
    chunks_total: int = 0

    def as_dict(self) -> dict:
        return {
            "total": self.total,
            "completed": self.completed,
            "errors": self.errors,
            "pending": self.pending,
            "chunks_total": self.chunks_total,
        }


__all__ = [
    "EntryStatus",
    "PENDING_STATUSES",
    "RESUMABLE_STATUSES",
    "ManifestEntry",
    "ManifestStats",
    "utc_now_iso",
]
