# hopper/__init__.py
"""
Hopper - resumable bulk ingestion into a vector knowledge store.

Feeds files from disk or pages crawled from a website through
extract -> chunk -> embed -> upsert, tracking every item in a durable
manifest so that interrupted runs can be resumed.
"""

__version__ = "0.4.0"

__all__ = ["__version__"]
