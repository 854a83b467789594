# hopper/api/dependencies.py
"""Shared FastAPI dependencies."""

from __future__ import annotations

from fastapi import Request

from hopper import __version__
from hopper.service import HopperService


def get_hopper_version() -> str:
    return __version__


def get_service(request: Request) -> HopperService:
    """The service container created by the app lifespan."""
    return request.app.state.service
