# hopper/ingest/resume.py
"""
Resume after interruption.

Resume is always scoped: a directory or a crawl seed. Unfinished and
failed entries inside the scope are reset to queued, then the scope is
enumerated again and run through the normal pipeline. Completed entries
with unchanged content fast-skip as usual. Requeued keys that the new
enumeration never produced are marked as errors.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional
from urllib.parse import urlsplit

from hopper.exceptions import HopperError
from hopper.ingest.state.manager import ManifestStore
from hopper.ingest.state.schema import EntryStatus, ManifestEntry
from hopper.logging.logger import get_logger
from hopper.logging.tags import INGEST

logger = get_logger(__name__)

MISSING_SOURCE = "source no longer present"


@dataclass(frozen=True)
class ResumeScope:
    directory: Optional[str] = None
    url: Optional[str] = None

    def __post_init__(self) -> None:
        if bool(self.directory) == bool(self.url):
            raise HopperError("Resume needs exactly one scope: a directory or a crawl URL")

    @property
    def label(self) -> str:
        return self.directory or self.url or ""

    def contains(self, key: str) -> bool:
        if self.directory:
            root = os.path.normpath(os.path.abspath(os.path.expanduser(self.directory)))
            return key == root or key.startswith(root.rstrip(os.sep) + os.sep)
        return urlsplit(key).hostname == urlsplit(self.url).hostname


@dataclass
class ResumePlan:
    scope: ResumeScope
    requeued: List[str] = field(default_factory=list)


class ResumeController:
    """Reconciles manifest state before and after a resumed run."""

    def __init__(self, store: ManifestStore) -> None:
        self._store = store

    async def prepare(self, scope: ResumeScope) -> ResumePlan:
        """Reset queued, processing and error entries in scope to queued."""
        entries = await self._store.list_resumable()
        keys = [entry.path for entry in entries if scope.contains(entry.path)]
        await self._store.requeue(keys)
        logger.info(f"{INGEST} Resume {scope.label}: {len(keys)} entries re-queued")
        return ResumePlan(scope=scope, requeued=keys)

    async def finalize(
        self, plan: ResumePlan, seen_keys: Iterable[str], complete: bool = True
    ) -> List[str]:
        """
        Mark requeued entries that were not found again. Returns their keys.

        When the enumeration stopped early (a crawl that hit its page cap),
        unseen entries may still exist, so they stay queued instead.
        """
        seen = set(seen_keys)
        unseen = [key for key in plan.requeued if key not in seen]
        if not complete:
            if unseen:
                logger.info(
                    f"{INGEST} Resume {plan.scope.label}: {len(unseen)} entries not reached, "
                    "left queued"
                )
            return []

        missing: List[str] = []
        for key in unseen:
            entry: Optional[ManifestEntry] = await self._store.get(key)
            if entry is None or entry.status is not EntryStatus.QUEUED:
                continue
            await self._store.upsert(entry.with_status(EntryStatus.ERROR, error=MISSING_SOURCE))
            missing.append(key)

        if missing:
            logger.warning(f"{INGEST} {len(missing)} re-queued entries no longer present")
        return missing


def requeued_files(plan: ResumePlan) -> List[Path]:
    """Requeued file keys that still exist on disk, in manifest order."""
    return [Path(key) for key in plan.requeued if os.path.isfile(key)]


__all__ = ["MISSING_SOURCE", "ResumeController", "ResumePlan", "ResumeScope", "requeued_files"]
