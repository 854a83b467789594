# hopper/ingest/state/__init__.py
"""
Manifest state for resumable ingestion.

Tracks, per source item:
- content checksum for change detection
- status (queued / processing / completed / error)
- error text and chunk count

Key exports:
- ManifestStore: async SQLite-backed store
- ManifestEntry: per-item record
- EntryStatus: lifecycle states
"""

from .manager import ManifestStore
from .schema import (
    PENDING_STATUSES,
    RESUMABLE_STATUSES,
    EntryStatus,
    ManifestEntry,
    ManifestStats,
)

__all__ = [
    "ManifestStore",
    "ManifestEntry",
    "ManifestStats",
    "EntryStatus",
    "PENDING_STATUSES",
    "RESUMABLE_STATUSES",
]
