# hopper/ingest/sources/__init__.py
from .base import UPLOAD_SCHEME, IngestItem
from .crawler import CrawledPage, CrawlStats, WebsiteCrawler, canonical_url, validate_seed_url
from .directory import enumerate_files

__all__ = [
    "CrawledPage",
    "CrawlStats",
    "IngestItem",
    "UPLOAD_SCHEME",
    "WebsiteCrawler",
    "canonical_url",
    "enumerate_files",
    "validate_seed_url",
]
