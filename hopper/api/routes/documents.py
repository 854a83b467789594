# hopper/api/routes/documents.py
"""Interactive single-document upload."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from hopper.api.dependencies import get_service
from hopper.api.models.schemas import DocumentResponse
from hopper.ingest.operations import ItemOutcome
from hopper.service import HopperService

router = APIRouter(prefix="/api", tags=["documents"])


@router.post("/documents", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile = File(...), service: HopperService = Depends(get_service)
) -> DocumentResponse:
    """
    Ingest one uploaded file synchronously.

    The file goes through the same pipeline as bulk items, keyed as
    `upload://<filename>`.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    data = await file.read()
    result = await service.ingest_upload(file.filename, data, file.content_type)
    if result.outcome is ItemOutcome.ERROR:
        raise HTTPException(status_code=422, detail=result.error or "Ingestion failed")

    return DocumentResponse(key=result.key, status=result.outcome.value, chunks=result.chunks)
