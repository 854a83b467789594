# hopper/api/routes/bulk.py
"""Bulk operation lifecycle: start, resume, inspect, clear."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from hopper.api.dependencies import get_service
from hopper.api.models.schemas import (
    AcceptedResponse,
    ClearResponse,
    CrawlRequest,
    IngestRequest,
    OperationResponse,
    ResumeRequest,
    StatsResponse,
)
from hopper.ingest.resume import ResumeScope
from hopper.logging.logger import get_logger
from hopper.logging.tags import API
from hopper.service import HopperService

logger = get_logger(__name__)

router = APIRouter(prefix="/api/bulk", tags=["bulk"])


@router.post("/ingest", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def start_ingest(
    request: IngestRequest, service: HopperService = Depends(get_service)
) -> AcceptedResponse:
    operation = service.start_ingest(request.directory, request.patterns, request.operation_id)
    logger.info(f"{API} Accepted ingest {operation.operation_id} for {request.directory}")
    return AcceptedResponse(operation_id=operation.operation_id)


@router.post("/crawl", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def start_crawl(
    request: CrawlRequest, service: HopperService = Depends(get_service)
) -> AcceptedResponse:
    operation = service.start_crawl(request.url, request.max_pages, request.operation_id)
    logger.info(f"{API} Accepted crawl {operation.operation_id} for {request.url}")
    return AcceptedResponse(operation_id=operation.operation_id)


@router.post("/resume", response_model=AcceptedResponse, status_code=status.HTTP_202_ACCEPTED)
async def start_resume(
    request: ResumeRequest, service: HopperService = Depends(get_service)
) -> AcceptedResponse:
    scope = ResumeScope(directory=request.directory, url=request.url)
    operation = service.start_resume(scope, request.max_pages, request.operation_id)
    logger.info(f"{API} Accepted resume {operation.operation_id} for {scope.label}")
    return AcceptedResponse(operation_id=operation.operation_id)


@router.get("/stats", response_model=StatsResponse)
async def stats(service: HopperService = Depends(get_service)) -> StatsResponse:
    return StatsResponse(**(await service.stats()).as_dict())


@router.get("/operations/{operation_id}", response_model=OperationResponse)
async def get_operation(
    operation_id: str, service: HopperService = Depends(get_service)
) -> OperationResponse:
    operation = service.operations.get(operation_id)
    if operation is None:
        raise HTTPException(status_code=404, detail=f"Unknown operation '{operation_id}'")
    return OperationResponse(**operation.snapshot())


@router.delete("/manifest", response_model=ClearResponse)
async def clear_manifest(service: HopperService = Depends(get_service)) -> ClearResponse:
    removed = await service.clear()
    logger.warning(f"{API} Manifest cleared ({removed} entries)")
    return ClearResponse(removed=removed)
