# hopper/api/app.py
"""FastAPI application for the hopper control surface."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hopper.api.dependencies import get_hopper_version
from hopper.api.routes import bulk_router, documents_router, health_router, progress_router
from hopper.core.config import load_config
from hopper.exceptions import (
    HopperError,
    OperationConflictError,
    StoreIOError,
)
from hopper.logging.logger import get_logger
from hopper.logging.tags import API
from hopper.service import HopperService

logger = get_logger(__name__)


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


def create_app(service: Optional[HopperService] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        service: Pre-built service container. Built from the default
                 config on startup when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        svc = service or HopperService.from_config(load_config())
        await svc.open()
        app.state.service = svc
        logger.info(f"{API} Service ready (manifest: {svc.store.path})")
        try:
            yield
        finally:
            await svc.close()
            logger.info(f"{API} Service stopped")

    app = FastAPI(
        title="hopper",
        description="Resumable bulk ingestion of documents and websites into a vector index.",
        version=get_hopper_version(),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(OperationConflictError)
    async def _conflict(request: Request, exc: OperationConflictError) -> JSONResponse:
        return _error(409, exc)

    @app.exception_handler(StoreIOError)
    async def _store_unavailable(request: Request, exc: StoreIOError) -> JSONResponse:
        logger.error(f"{API} Manifest unavailable: {exc}")
        return _error(503, exc)

    @app.exception_handler(HopperError)
    async def _bad_request(request: Request, exc: HopperError) -> JSONResponse:
        return _error(400, exc)

    app.include_router(health_router)
    app.include_router(bulk_router)
    app.include_router(progress_router)
    app.include_router(documents_router)

    return app
