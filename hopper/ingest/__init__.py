# hopper/ingest/__init__.py
"""
Bulk ingestion pipeline.

Key components:
- state: durable manifest of per-item status and checksum
- hashing: streaming content checksums and deterministic point IDs
- extraction: format-specific byte -> text extractors
- chunking: deterministic sliding-window chunker
- sources: directory enumeration and website crawling
- batching: embedding and upsert batchers with retry
- scheduler: bounded worker pool running the per-item pipeline
- resume: re-queues unfinished work after an interruption
"""
