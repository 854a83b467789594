# hopper/core/config/__init__.py

from hopper.core.config.loader import load_config
from hopper.core.config.schema import (
    BulkConfig,
    CrawlerConfig,
    ExtractionConfig,
    HopperConfig,
    LoggingConfig,
    ManifestConfig,
    PluginConfig,
    ProgressConfig,
    RetryConfig,
    VectorDBConfig,
)

__all__ = [
    "load_config",
    "HopperConfig",
    "BulkConfig",
    "RetryConfig",
    "CrawlerConfig",
    "ExtractionConfig",
    "PluginConfig",
    "VectorDBConfig",
    "ManifestConfig",
    "ProgressConfig",
    "LoggingConfig",
]
