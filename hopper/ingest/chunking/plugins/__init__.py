# hopper/ingest/chunking/plugins/__init__.py
from .sliding import SlidingWindowChunker, split_text

__all__ = ["SlidingWindowChunker", "split_text"]
