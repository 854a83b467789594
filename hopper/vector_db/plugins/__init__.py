# hopper/vector_db/plugins/__init__.py
from .qdrant import QdrantVectorIndex

__all__ = ["QdrantVectorIndex"]
