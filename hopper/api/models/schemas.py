# hopper/api/models/schemas.py
"""Request and response models for the hopper HTTP API."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class HealthResponse(BaseModel):
    status: str
    version: str


class IngestRequest(BaseModel):
    """Start a bulk run over a local directory."""

    directory: str = Field(..., description="Root directory to enumerate")
    patterns: Optional[List[str]] = Field(None, description="Filename globs, e.g. ['*.pdf']")
    operation_id: Optional[str] = Field(None, description="Caller-chosen id for progress tracking")


class CrawlRequest(BaseModel):
    url: str = Field(..., description="Seed URL; only its hostname is crawled")
    max_pages: Optional[int] = Field(None, ge=1)
    operation_id: Optional[str] = None


class ResumeRequest(BaseModel):
    """Resume needs an explicit scope: exactly one of directory or url."""

    directory: Optional[str] = None
    url: Optional[str] = None
    max_pages: Optional[int] = Field(None, ge=1, description="Page cap for a url scope")
    operation_id: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one_scope(self) -> "ResumeRequest":
        if bool(self.directory) == bool(self.url):
            raise ValueError("provide exactly one of 'directory' or 'url'")
        return self


class AcceptedResponse(BaseModel):
    operation_id: str
    status: str = "accepted"


class StatsResponse(BaseModel):
    total: int
    completed: int
    errors: int
    pending: int
    chunks_total: int


class OperationResponse(BaseModel):
    operation_id: str
    kind: str
    scope: str
    status: str
    total: int
    completed: int
    skipped: int
    errors: int
    chunks_total: int
    error: Optional[str] = None
    started_at: str
    finished_at: Optional[str] = None
    pages_processed: Optional[int] = None
    total_urls: Optional[int] = None


class ClearResponse(BaseModel):
    removed: int


class DocumentResponse(BaseModel):
    key: str
    status: str
    chunks: int = 0
    error: Optional[str] = None
