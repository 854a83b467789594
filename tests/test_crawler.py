# tests/test_crawler.py
"""
Tests for hopper.ingest.sources.crawler.

A fake site is served through httpx.MockTransport; no network access.
"""

import httpx
import pytest

from hopper.core.config.schema import CrawlerConfig
from hopper.exceptions import CrawlError
from hopper.ingest.sources.crawler import WebsiteCrawler, canonical_url, validate_seed_url

BASE = "https://site.test"


def page(title: str, body: str, links=()) -> str:
    anchors = "".join(f'<a href="{href}">{href}</a>' for href in links)
    return (
        f"<html><head><title>{title}</title></head><body>"
        f"<nav><a href='/nav-only'>menu</a></nav>"
        f"<main><p>{body}</p>{anchors}</main>"
        f"<footer>footer text</footer></body></html>"
    )


SITE = {
    "/": page("Home", "welcome", ["/a", "/b", "/c?x=1", "/a#top", "https://other.test/x", "mailto:x@y.z"]),
    "/a": page("A", "alpha", ["/d", "/", "http://elsewhere.test/"]),
    "/b": page("B", "bravo", ["/b?page=2"]),
    "/c": page("C", "charlie"),
    "/d": page("D", "delta"),
}


class MockSite:
    """Serves SITE, optionally with extra routes, and records requests."""

    def __init__(self, extra=None, robots=None):
        self.routes = {**SITE, **(extra or {})}
        self.robots = robots
        self.requested = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requested.append(str(request.url))
        if path == "/robots.txt":
            if self.robots is None:
                return httpx.Response(404)
            return httpx.Response(200, text=self.robots)
        route = self.routes.get(path)
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, text=route, headers={"content-type": "text/html; charset=utf-8"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def make_crawler(site: MockSite, messages=None, sleeps=None, **config) -> WebsiteCrawler:
    async def notify(message):
        if messages is not None:
            messages.append(message)

    async def sleep(seconds):
        if sleeps is not None:
            sleeps.append(seconds)

    config.setdefault("delay_seconds", 0)
    return WebsiteCrawler(
        CrawlerConfig(**config), transport=site.transport, notify=notify, sleep=sleep
    )


class TestCanonicalUrl:
    def test_drops_query_and_fragment(self):
        assert canonical_url("https://Site.Test/a?x=1#frag") == "https://site.test/a"

    def test_empty_path_becomes_root(self):
        assert canonical_url("https://site.test") == "https://site.test/"

    def test_validate_seed(self):
        assert validate_seed_url(" https://site.test/docs?q=1 ") == "https://site.test/docs"

    @pytest.mark.parametrize("bad", ["", "not a url", "ftp://site.test/", "/relative/path"])
    def test_invalid_seed(self, bad):
        with pytest.raises(CrawlError):
            validate_seed_url(bad)


class TestWebsiteCrawler:
    @pytest.mark.asyncio
    async def test_bfs_internal_only(self):
        site = MockSite()
        crawler = make_crawler(site)

        pages = await crawler.crawl_all(BASE)

        assert [p.url for p in pages] == [
            f"{BASE}/",
            f"{BASE}/a",
            f"{BASE}/b",
            f"{BASE}/c",
            f"{BASE}/d",
        ]
        assert not any("other.test" in url or "elsewhere.test" in url for url in site.requested)
        assert crawler.stats.pages_processed == 5
        assert crawler.stats.failed == 0
        assert not crawler.stats.capped

    @pytest.mark.asyncio
    async def test_each_canonical_url_fetched_once(self):
        site = MockSite()
        await make_crawler(site).crawl_all(BASE)

        fetched = [u for u in site.requested if not u.endswith("/robots.txt")]
        assert len(fetched) == len(set(fetched)) == 5
        assert all("?" not in u and "#" not in u for u in fetched)

    @pytest.mark.asyncio
    async def test_boilerplate_removed(self):
        pages = await make_crawler(MockSite()).crawl_all(BASE)
        home = pages[0]

        assert home.title == "Home"
        assert "welcome" in home.text
        assert "menu" not in home.text
        assert "footer text" not in home.text

    @pytest.mark.asyncio
    async def test_nav_links_not_followed(self):
        site = MockSite()
        await make_crawler(site).crawl_all(BASE)
        assert f"{BASE}/nav-only" not in site.requested

    @pytest.mark.asyncio
    async def test_max_pages(self):
        crawler = make_crawler(MockSite())
        pages = await crawler.crawl_all(BASE, max_pages=2)

        assert len(pages) == 2
        assert crawler.stats.total_urls >= 2
        assert crawler.stats.capped

    @pytest.mark.asyncio
    async def test_failed_page_skipped(self):
        site = MockSite(
            extra={
                "/": page("Home", "welcome", ["/broken", "/a"]),
                "/broken": httpx.Response(500),
            }
        )
        messages = []
        crawler = make_crawler(site, messages=messages)

        pages = await crawler.crawl_all(BASE)

        assert f"{BASE}/broken" not in [p.url for p in pages]
        assert crawler.stats.failed == 1
        assert any(m.startswith(f"Skipped {BASE}/broken") for m in messages)

    @pytest.mark.asyncio
    async def test_non_html_skipped(self):
        site = MockSite(
            extra={
                "/": page("Home", "welcome", ["/file.pdf", "/c"]),
                "/file.pdf": httpx.Response(
                    200, content=b"%PDF", headers={"content-type": "application/pdf"}
                ),
            }
        )
        pages = await make_crawler(site).crawl_all(BASE)
        assert [p.url for p in pages] == [f"{BASE}/", f"{BASE}/c"]

    @pytest.mark.asyncio
    async def test_robots_is_advisory(self):
        messages = []
        site = MockSite(robots="User-agent: *\nDisallow: /\n")

        pages = await make_crawler(site, messages=messages).crawl_all(BASE)

        assert len(pages) == 5
        assert "Warning: robots.txt disallows crawling" in messages

    @pytest.mark.asyncio
    async def test_progress_messages(self):
        messages = []
        await make_crawler(MockSite(), messages=messages).crawl_all(BASE, max_pages=2)

        assert messages[0] == f"Starting recursive crawl of: {BASE}/"
        assert "Checking robots.txt..." in messages
        assert f"Crawling page 1/2: {BASE}/" in messages
        assert messages[-1] == "Crawl complete. Processed 2 pages."

    @pytest.mark.asyncio
    async def test_politeness_delay(self):
        sleeps = []
        await make_crawler(MockSite(), sleeps=sleeps, delay_seconds=0.5).crawl_all(BASE, max_pages=3)
        assert sleeps and all(s == 0.5 for s in sleeps)
        assert len(sleeps) == 2

    @pytest.mark.asyncio
    async def test_bad_seed_raises(self):
        with pytest.raises(CrawlError):
            await make_crawler(MockSite()).crawl_all("nope")
