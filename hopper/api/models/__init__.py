# hopper/api/models/__init__.py
"""API request and response models."""

from hopper.api.models.schemas import (
    AcceptedResponse,
    ClearResponse,
    CrawlRequest,
    DocumentResponse,
    HealthResponse,
    IngestRequest,
    OperationResponse,
    ResumeRequest,
    StatsResponse,
)

__all__ = [
    "AcceptedResponse",
    "ClearResponse",
    "CrawlRequest",
    "DocumentResponse",
    "HealthResponse",
    "IngestRequest",
    "OperationResponse",
    "ResumeRequest",
    "StatsResponse",
]
