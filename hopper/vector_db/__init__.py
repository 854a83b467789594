# hopper/vector_db/__init__.py
from .base import VectorIndex, VectorPoint
from .plugins import QdrantVectorIndex

__all__ = ["QdrantVectorIndex", "VectorIndex", "VectorPoint"]
