# hopper/ingest/sources/crawler.py
"""
Bounded breadth-first website crawler.

The frontier is a FIFO queue seeded with the base URL; a visited set keyed
by canonical URL (no query, no fragment) guarantees each page is fetched
once. Only links on the seed's hostname are followed. robots.txt is
checked once, as an advisory warning.
"""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Deque, List, Optional, Set
from urllib.parse import urljoin, urlsplit, urlunsplit

import httpx

from hopper.core.config.schema import CrawlerConfig
from hopper.exceptions import CrawlError
from hopper.ingest.extraction.plugins.html import parse_page
from hopper.logging.logger import get_logger
from hopper.logging.tags import CRAWLER

logger = get_logger(__name__)

Notify = Callable[[str], Awaitable[None]]

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


@dataclass(frozen=True)
class CrawledPage:
    url: str
    title: str
    text: str


@dataclass
class CrawlStats:
    pages_processed: int = 0
    failed: int = 0
    total_urls: int = 0
    capped: bool = False


def canonical_url(url: str) -> str:
    """scheme://host[:port]/path with query and fragment dropped."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), parts.path or "/", "", ""))


def validate_seed_url(base_url: str) -> str:
    parts = urlsplit(base_url.strip())
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise CrawlError(f"Invalid seed URL: {base_url!r}")
    return canonical_url(base_url.strip())


async def _silent(message: str) -> None:
    return None


class WebsiteCrawler:
    """
    Crawl one site, yielding pages as they are fetched.

    Usage:
        crawler = WebsiteCrawler(config.crawler)
        async for page in crawler.crawl("https://docs.example.com"):
            ...
        crawler.stats.pages_processed
    """

    def __init__(
        self,
        config: Optional[CrawlerConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        notify: Optional[Notify] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config or CrawlerConfig()
        self._transport = transport
        self._notify = notify or _silent
        self._sleep = sleep
        self.visited: Set[str] = set()
        self.stats = CrawlStats()

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={
                "User-Agent": self.config.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            },
            timeout=self.config.timeout,
            follow_redirects=True,
            transport=self._transport,
        )

    async def check_robots(self, client: httpx.AsyncClient, base_url: str) -> bool:
        """
        Return True if robots.txt appears to disallow crawling.

        Advisory only; the crawl proceeds either way.
        """
        await self._notify("Checking robots.txt...")
        try:
            response = await client.get(
                urljoin(base_url, "/robots.txt"), timeout=self.config.robots_timeout
            )
        except httpx.HTTPError as e:
            logger.debug(f"{CRAWLER} Could not fetch robots.txt: {e}")
            return False

        if response.status_code == 200 and "disallow: /" in response.text.lower():
            logger.warning(f"{CRAWLER} robots.txt disallows crawling of {base_url}")
            await self._notify("Warning: robots.txt disallows crawling")
            return True
        return False

    def _internal_links(self, page_url: str, hrefs: List[str], hostname: str) -> List[str]:
        links: List[str] = []
        for href in hrefs:
            absolute = urljoin(page_url, href)
            parts = urlsplit(absolute)
            if parts.scheme not in ("http", "https") or parts.hostname != hostname:
                continue
            links.append(canonical_url(absolute))
        return links

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> Optional[str]:
        response = await client.get(url)
        response.raise_for_status()
        content_type = response.headers.get("content-type", "text/html").split(";")[0].strip()
        if content_type not in HTML_CONTENT_TYPES:
            logger.debug(f"{CRAWLER} Skipping non-HTML {url} ({content_type})")
            return None
        return response.text

    async def crawl(self, base_url: str, max_pages: Optional[int] = None) -> AsyncIterator[CrawledPage]:
        """
        Breadth-first crawl from `base_url`.

        Raises:
            CrawlError: the seed URL is not an absolute http(s) URL.
        """
        seed = validate_seed_url(base_url)
        hostname = urlsplit(seed).hostname
        limit = max_pages or self.config.max_pages

        self.visited = set()
        self.stats = CrawlStats()
        queue: Deque[str] = deque([seed])

        logger.info(f"{CRAWLER} Starting crawl of {seed} (max {limit} pages)")
        await self._notify(f"Starting recursive crawl of: {seed}")

        async with self._client() as client:
            await self.check_robots(client, seed)

            while queue and self.stats.pages_processed < limit:
                url = queue.popleft()
                if url in self.visited:
                    continue
                self.visited.add(url)

                await self._notify(
                    f"Crawling page {self.stats.pages_processed + 1}/{limit}: {url}"
                )
                try:
                    html = await self._fetch(client, url)
                except httpx.HTTPError as e:
                    self.stats.failed += 1
                    logger.warning(f"{CRAWLER} Failed to crawl {url}: {e}")
                    await self._notify(f"Skipped {url}: {e}")
                    html = None

                if html is not None:
                    parsed = parse_page(html)
                    self.stats.pages_processed += 1
                    for link in self._internal_links(url, parsed.links, hostname):
                        if link not in self.visited:
                            queue.append(link)
                    self.stats.total_urls = len(self.visited | set(queue))
                    yield CrawledPage(url=url, title=parsed.title, text=parsed.text)

                if queue and self.stats.pages_processed < limit and self.config.delay_seconds > 0:
                    await self._sleep(self.config.delay_seconds)

        self.stats.total_urls = len(self.visited | set(queue))
        self.stats.capped = any(url not in self.visited for url in queue)
        logger.info(
            f"{CRAWLER} Crawl complete: {self.stats.pages_processed} pages, "
            f"{self.stats.failed} failed"
        )
        await self._notify(f"Crawl complete. Processed {self.stats.pages_processed} pages.")

    async def crawl_all(self, base_url: str, max_pages: Optional[int] = None) -> List[CrawledPage]:
        return [page async for page in self.crawl(base_url, max_pages)]


__all__ = ["CrawledPage", "CrawlStats", "WebsiteCrawler", "canonical_url", "validate_seed_url"]
