# hopper/ingest/state/manager.py
"""
Durable manifest store backed by SQLite.

The manifest is the authoritative record of what has been ingested:
- completed + same checksum -> skip
- queued / processing / error -> eligible for resume

Every write is a single-row upsert committed immediately, so a crash
loses at most the in-flight status transition, never a completed record.
Any storage failure is raised as StoreIOError and is fatal for the run.
"""

from __future__ import annotations

import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Iterable, List, Optional

import aiosqlite

from hopper.exceptions import StoreIOError
from hopper.ingest.state.schema import (
    PENDING_STATUSES,
    RESUMABLE_STATUSES,
    EntryStatus,
    ManifestEntry,
    ManifestStats,
    utc_now_iso,
)
from hopper.logging.logger import get_logger
from hopper.logging.tags import MANIFEST

logger = get_logger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS bulk_files (
    path TEXT PRIMARY KEY,
    checksum TEXT NOT NULL,
    status TEXT NOT NULL,
    error TEXT,
    chunks_count INTEGER DEFAULT 0,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_bulk_files_status ON bulk_files(status);
CREATE INDEX IF NOT EXISTS idx_bulk_files_checksum ON bulk_files(checksum);
"""

UPSERT_SQL = """
INSERT INTO bulk_files (path, checksum, status, error, chunks_count, updated_at)
VALUES (:path, :checksum, :status, :error, :chunks_count, :updated_at)
ON CONFLICT(path) DO UPDATE SET
    checksum=excluded.checksum,
    status=excluded.status,
    error=excluded.error,
    chunks_count=excluded.chunks_count,
    updated_at=excluded.updated_at
"""

SELECT_COLUMNS = "SELECT path, checksum, status, error, chunks_count, updated_at FROM bulk_files"

STATS_SQL = """
SELECT
    COUNT(*) AS total,
    SUM(CASE WHEN status = 'completed' THEN 1 ELSE 0 END) AS completed,
    SUM(CASE WHEN status = 'error' THEN 1 ELSE 0 END) AS errors,
    SUM(CASE WHEN status IN ('queued', 'processing') THEN 1 ELSE 0 END) AS pending,
    SUM(chunks_count) AS chunks_total
FROM bulk_files
"""


def _row_to_entry(row: aiosqlite.Row) -> ManifestEntry:
    return ManifestEntry(
        path=row["path"],
        checksum=row["checksum"],
        status=EntryStatus(row["status"]),
        error=row["error"],
        chunks_count=row["chunks_count"] or 0,
        updated_at=row["updated_at"],
    )


class ManifestStore:
    """
    Async manifest store.

    Usage:
        async with ManifestStore("bulk_manifest.db") as store:
            await store.upsert(ManifestEntry.create(path, checksum))
            stats = await store.stats()
    """

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        self._db: Optional[aiosqlite.Connection] = None

    @property
    def path(self) -> str:
        return self._path

    @property
    def is_open(self) -> bool:
        return self._db is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> "ManifestStore":
        if self._db is not None:
            return self

        async with self._guard("open"):
            if self._path != ":memory:":
                Path(self._path).parent.mkdir(parents=True, exist_ok=True)
            db = await aiosqlite.connect(self._path)
            db.row_factory = aiosqlite.Row
            await db.execute("PRAGMA journal_mode = WAL")
            await db.executescript(SCHEMA)
            await db.commit()
            self._db = db

        logger.info(f"{MANIFEST} Manifest opened at {self._path}")
        return self

    async def close(self) -> None:
        if self._db is None:
            return
        db, self._db = self._db, None
        async with self._guard("close"):
            await db.close()
        logger.debug(f"{MANIFEST} Manifest closed")

    async def __aenter__(self) -> "ManifestStore":
        return await self.open()

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except (sqlite3.Error, OSError, ValueError) as e:
            logger.error(f"{MANIFEST} Manifest {operation} failed: {e}")
            raise StoreIOError(f"Manifest {operation} failed: {e}") from e

    def _conn(self) -> aiosqlite.Connection:
        if self._db is None:
            raise StoreIOError("Manifest store is not open")
        return self._db

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def upsert(self, entry: ManifestEntry) -> None:
        """Full-row replace keyed by entry.path."""
        db = self._conn()
        async with self._guard("upsert"):
            await db.execute(
                UPSERT_SQL,
                {
                    "path": entry.path,
                    "checksum": entry.checksum,
                    "status": entry.status.value,
                    "error": entry.error,
                    "chunks_count": entry.chunks_count,
                    "updated_at": entry.updated_at or utc_now_iso(),
                },
            )
            await db.commit()

    async def requeue(self, keys: Iterable[str]) -> int:
        """Reset the given entries to queued and clear their error."""
        keys = list(keys)
        if not keys:
            return 0

        db = self._conn()
        now = utc_now_iso()
        async with self._guard("requeue"):
            await db.executemany(
                "UPDATE bulk_files SET status = ?, error = NULL, updated_at = ? WHERE path = ?",
                [(EntryStatus.QUEUED.value, now, key) for key in keys],
            )
            await db.commit()

        logger.info(f"{MANIFEST} Re-queued {len(keys)} entries")
        return len(keys)

    async def clear(self) -> int:
        """Delete every entry. Irreversible."""
        db = self._conn()
        async with self._guard("clear"):
            cursor = await db.execute("DELETE FROM bulk_files")
            await db.commit()
            removed = cursor.rowcount
        logger.info(f"{MANIFEST} Manifest cleared ({removed} entries)")
        return removed

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Optional[ManifestEntry]:
        db = self._conn()
        async with self._guard("get"):
            async with db.execute(f"{SELECT_COLUMNS} WHERE path = ?", (key,)) as cursor:
                row = await cursor.fetchone()
            return _row_to_entry(row) if row is not None else None

    async def _list_by_status(self, statuses: Iterable[EntryStatus]) -> List[ManifestEntry]:
        statuses = [s.value for s in statuses]
        placeholders = ",".join("?" for _ in statuses)
        db = self._conn()
        async with self._guard("list"):
            rows = await db.execute_fetchall(
                f"{SELECT_COLUMNS} WHERE status IN ({placeholders}) ORDER BY path",
                statuses,
            )
            return [_row_to_entry(row) for row in rows]

    async def list_pending(self) -> List[ManifestEntry]:
        """Entries with status queued or processing."""
        return await self._list_by_status(PENDING_STATUSES)

    async def list_errored(self) -> List[ManifestEntry]:
        return await self._list_by_status([EntryStatus.ERROR])

    async def list_resumable(self) -> List[ManifestEntry]:
        """Entries with status queued, processing or error."""
        return await self._list_by_status(RESUMABLE_STATUSES)

    async def list_all(self) -> List[ManifestEntry]:
        db = self._conn()
        async with self._guard("list"):
            rows = await db.execute_fetchall(f"{SELECT_COLUMNS} ORDER BY path")
            return [_row_to_entry(row) for row in rows]

    async def stats(self) -> ManifestStats:
        db = self._conn()
        async with self._guard("stats"):
            async with db.execute(STATS_SQL) as cursor:
                row = await cursor.fetchone()
        return ManifestStats(
            total=row["total"] or 0,
            completed=row["completed"] or 0,
            errors=row["errors"] or 0,
            pending=row["pending"] or 0,
            chunks_total=row["chunks_total"] or 0,
        )


__all__ = ["ManifestStore", "SCHEMA"]
