# hopper/api/__init__.py
"""HTTP control surface."""

from hopper.api.app import create_app

__all__ = ["create_app"]
