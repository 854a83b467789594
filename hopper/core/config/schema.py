# hopper/core/config/schema.py
"""
Configuration schema for hopper.

This is the SINGLE source of truth for hopper configuration.

Schema hierarchy:
- HopperConfig: root config consumed by the service container
- BulkConfig: worker pool, batching and chunking
- RetryConfig: backoff policy shared by embedding and upsert batches
- CrawlerConfig: website crawler limits and politeness
- ExtractionConfig: format-specific extraction options
- PluginConfig: embedding provider selection
- VectorDBConfig: vector index connection
- ManifestConfig / ProgressConfig / LoggingConfig
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BulkConfig(BaseModel):
    """Worker pool, batching and chunking settings."""

    concurrency: int = Field(6, ge=1, description="Concurrent worker slots")
    embed_batch_size: int = Field(128, ge=1, description="Texts per embedding call")
    upsert_batch_size: int = Field(256, ge=1, description="Points per upsert call")
    chunk_size: int = Field(500, ge=1, description="Chunk window in characters")
    chunk_overlap: int = Field(200, ge=0, description="Overlap between windows")
    file_patterns: list[str] = Field(
        default_factory=lambda: ["*.pdf"],
        description="Filename globs matched during directory enumeration",
    )

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _overlap_below_size(self) -> "BulkConfig":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be < chunk_size ({self.chunk_size})"
            )
        return self


class RetryConfig(BaseModel):
    """Exponential backoff with jitter for external calls."""

    max_attempts: int = Field(5, ge=1)
    initial_delay: float = Field(1.0, ge=0)
    max_delay: float = Field(10.0, ge=0)
    jitter: float = Field(1.0, ge=0)

    model_config = ConfigDict(extra="forbid")


class CrawlerConfig(BaseModel):
    """Website crawler limits and politeness."""

    max_pages: int = Field(50, ge=1)
    delay_seconds: float = Field(1.0, ge=0)
    timeout: float = Field(10.0, gt=0)
    robots_timeout: float = Field(5.0, gt=0)
    user_agent: str = "hopper-crawler/0.4 (+https://github.com/hopper-ingest/hopper)"

    model_config = ConfigDict(extra="forbid")


class ExtractionConfig(BaseModel):
    """Options passed to content extractors."""

    strip_subtitle_timestamps: bool = True

    model_config = ConfigDict(extra="forbid")


class PluginConfig(BaseModel):
    """
    Generic plugin configuration block.

    Examples:
        >>> PluginConfig(plugin_name="openai", kwargs={"model": "text-embedding-3-small"})
    """

    plugin_name: str = Field(..., description="Plugin name in the registry")
    kwargs: dict[str, Any] = Field(default_factory=dict, description="Plugin init kwargs")

    model_config = ConfigDict(extra="forbid")


class VectorDBConfig(BaseModel):
    """Qdrant connection and target collection."""

    url: str = "http://localhost:6333"
    api_key: str | None = None
    collection: str = "documents"
    distance: str = "cosine"

    model_config = ConfigDict(extra="forbid")


class ManifestConfig(BaseModel):
    path: str = "bulk_manifest.db"

    model_config = ConfigDict(extra="forbid")


class ProgressConfig(BaseModel):
    heartbeat_seconds: float = Field(15.0, gt=0)

    model_config = ConfigDict(extra="forbid")


class LoggingConfig(BaseModel):
    level: str = "INFO"

    model_config = ConfigDict(extra="forbid")


class HopperConfig(BaseModel):
    """
    Root configuration.

    Services are BUILT FROM this config; none of them own config.
    """

    bulk: BulkConfig = Field(default_factory=BulkConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    crawler: CrawlerConfig = Field(default_factory=CrawlerConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    embedding: PluginConfig = Field(
        default_factory=lambda: PluginConfig(plugin_name="openai")
    )
    vector_db: VectorDBConfig = Field(default_factory=VectorDBConfig)
    manifest: ManifestConfig = Field(default_factory=ManifestConfig)
    progress: ProgressConfig = Field(default_factory=ProgressConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")
