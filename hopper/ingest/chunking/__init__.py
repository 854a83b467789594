# hopper/ingest/chunking/__init__.py
from .base import Chunk
from .plugins import SlidingWindowChunker, split_text

__all__ = ["Chunk", "SlidingWindowChunker", "split_text"]
