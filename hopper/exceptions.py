# hopper/exceptions.py
"""
Exception taxonomy for hopper.

Per-item errors (extraction, embedding, upsert) are recorded in the
manifest and never abort a run. Run-level errors (store I/O, enumeration,
crawl seed, config) end the run.
"""

from __future__ import annotations


class HopperError(Exception):
    """Base class for all hopper errors."""


# ---------------------------------------------------------------------------
# Per-item errors
# ---------------------------------------------------------------------------


class ItemError(HopperError):
    """An error confined to a single source item."""


class ExtractionError(ItemError):
    """Unsupported format, corrupt payload, or no extractable text."""


class EmbeddingError(ItemError):
    """Embedding service still failing after the last retry attempt."""


class UpsertError(ItemError):
    """Vector index still rejecting a batch after the last retry attempt."""


# ---------------------------------------------------------------------------
# Run-level errors
# ---------------------------------------------------------------------------


class StoreIOError(HopperError):
    """Manifest store unreachable or corrupt. Fatal for the run."""


class EnumerationError(HopperError):
    """Source root missing or unreadable. The run never starts."""


class CrawlError(HopperError):
    """Crawl seed URL is invalid."""


class ConfigError(HopperError):
    """Configuration file missing or invalid."""


class OperationConflictError(HopperError):
    """An operation with the same id is still running."""


__all__ = [
    "HopperError",
    "ItemError",
    "ExtractionError",
    "EmbeddingError",
    "UpsertError",
    "StoreIOError",
    "EnumerationError",
    "CrawlError",
    "ConfigError",
    "OperationConflictError",
]
