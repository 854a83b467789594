# hopper/api/routes/__init__.py
"""API route modules."""

from hopper.api.routes.bulk import router as bulk_router
from hopper.api.routes.documents import router as documents_router
from hopper.api.routes.health import router as health_router
from hopper.api.routes.progress import router as progress_router

__all__ = ["bulk_router", "documents_router", "health_router", "progress_router"]
