# hopper/logging/tags.py
"""
Subsystem tags prefixed to log messages.

Usage:
    logger.info(f"{INGEST} Processing {path}")
"""

CLI = "[CLI]"
API = "[API]"
INGEST = "[INGEST]"
MANIFEST = "[MANIFEST]"
EXTRACT = "[EXTRACT]"
CHUNKING = "[CHUNKING]"
EMBEDDING = "[EMBEDDING]"
VECTOR_DB = "[VECTOR_DB]"
CRAWLER = "[CRAWLER]"
PROGRESS = "[PROGRESS]"

__all__ = [
    "CLI",
    "API",
    "INGEST",
    "MANIFEST",
    "EXTRACT",
    "CHUNKING",
    "EMBEDDING",
    "VECTOR_DB",
    "CRAWLER",
    "PROGRESS",
]
