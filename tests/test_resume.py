# tests/test_resume.py
"""
Resume after an interrupted run.

The interruption is real: workers are blocked mid-embed and the
operation task is cancelled, leaving entries stuck in `processing`.
"""

import asyncio

import httpx
import pytest

from hopper.core.config.schema import CrawlerConfig
from hopper.exceptions import HopperError
from hopper.ingest.resume import MISSING_SOURCE, ResumeController, ResumeScope
from hopper.ingest.state import EntryStatus, ManifestEntry, ManifestStore

from conftest import MockEmbeddingPlugin, write_text_files


def blocking_after(limit: int):
    """before_embed hook that lets `limit` calls through, then blocks forever."""
    calls = 0
    never = asyncio.Event()

    async def hook():
        nonlocal calls
        calls += 1
        if calls > limit:
            await never.wait()

    return hook


async def interrupt_after(service, root, completed: int):
    service.start_ingest(root, operation_id="op-first")

    async def reached():
        while (await service.store.stats()).completed < completed:
            await asyncio.sleep(0.01)

    await asyncio.wait_for(reached(), timeout=10)
    await asyncio.sleep(0.05)
    await service.operations.cancel_all()


class TestResumeScope:
    def test_requires_exactly_one(self):
        with pytest.raises(HopperError):
            ResumeScope()
        with pytest.raises(HopperError):
            ResumeScope(directory="/data", url="https://x.test")

    def test_directory_contains(self, tmp_path):
        scope = ResumeScope(directory=str(tmp_path / "docs"))
        assert scope.contains(str(tmp_path / "docs" / "a.pdf"))
        assert scope.contains(str(tmp_path / "docs" / "sub" / "b.pdf"))
        assert not scope.contains(str(tmp_path / "docs2" / "a.pdf"))

    def test_url_contains_same_host(self):
        scope = ResumeScope(url="https://docs.test/start")
        assert scope.contains("https://docs.test/other")
        assert not scope.contains("https://other.test/")


class TestResumeController:
    @pytest.mark.asyncio
    async def test_prepare_only_touches_scope(self, tmp_path):
        inside = str(tmp_path / "docs" / "a.pdf")
        outside = str(tmp_path / "other" / "b.pdf")
        done = str(tmp_path / "docs" / "c.pdf")

        async with ManifestStore(tmp_path / "m.db") as store:
            await store.upsert(ManifestEntry.create(inside, "x").with_status(EntryStatus.ERROR, error="bad"))
            await store.upsert(ManifestEntry.create(outside, "x").with_status(EntryStatus.PROCESSING))
            await store.upsert(ManifestEntry.create(done, "x").with_status(EntryStatus.COMPLETED))

            plan = await ResumeController(store).prepare(ResumeScope(directory=str(tmp_path / "docs")))

            assert plan.requeued == [inside]
            assert (await store.get(inside)).status is EntryStatus.QUEUED
            assert (await store.get(outside)).status is EntryStatus.PROCESSING
            assert (await store.get(done)).status is EntryStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_finalize_marks_unseen(self, tmp_path):
        a, b = str(tmp_path / "a.pdf"), str(tmp_path / "b.pdf")
        async with ManifestStore(tmp_path / "m.db") as store:
            for key in (a, b):
                await store.upsert(ManifestEntry.create(key, "x").with_status(EntryStatus.PROCESSING))
            controller = ResumeController(store)
            plan = await controller.prepare(ResumeScope(directory=str(tmp_path)))

            missing = await controller.finalize(plan, seen_keys=[a])

            assert missing == [b]
            entry = await store.get(b)
            assert entry.status is EntryStatus.ERROR
            assert entry.error == MISSING_SOURCE

    @pytest.mark.asyncio
    async def test_finalize_incomplete_leaves_unseen_queued(self, tmp_path):
        a, b = "https://docs.test/a", "https://docs.test/b"
        async with ManifestStore(tmp_path / "m.db") as store:
            for key in (a, b):
                await store.upsert(ManifestEntry.create(key, "x").with_status(EntryStatus.ERROR, error="e"))
            controller = ResumeController(store)
            plan = await controller.prepare(ResumeScope(url="https://docs.test/"))

            missing = await controller.finalize(plan, seen_keys=[a], complete=False)

            assert missing == []
            entry = await store.get(b)
            assert entry.status is EntryStatus.QUEUED
            assert entry.error is None


class TestResume:
    @pytest.mark.asyncio
    async def test_interrupted_run_resumes_to_completion(self, make_service, tmp_path):
        root = tmp_path / "docs"
        write_text_files(root, 20)
        embedder = MockEmbeddingPlugin()
        embedder.before_embed = blocking_after(10)

        async with make_service(embedding_plugin=embedder) as service:
            await interrupt_after(service, root, completed=10)
            stuck = await service.store.list_pending()
            assert (await service.stats()).completed == 10
            assert stuck and all(e.status is EntryStatus.PROCESSING for e in stuck)

            embedder.before_embed = None
            op = await service.resume(ResumeScope(directory=str(root)))
            stats = await service.stats()

        assert stats.completed == 20
        assert stats.pending == 0
        assert stats.errors == 0
        assert op.skipped == 10
        assert op.completed == 10
        assert op.details["requeued"] == len(stuck)
        assert op.details["missing"] == 0

    @pytest.mark.asyncio
    async def test_missing_source_marked_error(self, make_service, tmp_path):
        root = tmp_path / "docs"
        write_text_files(root, 8)
        embedder = MockEmbeddingPlugin()
        embedder.before_embed = blocking_after(4)

        async with make_service(embedding_plugin=embedder) as service:
            await interrupt_after(service, root, completed=4)
            gone = (await service.store.list_pending())[0].path
            os_path = root / gone.rsplit("/", 1)[-1]
            os_path.unlink()

            embedder.before_embed = None
            op = await service.resume(ResumeScope(directory=str(root)))
            entry = await service.store.get(gone)
            stats = await service.stats()

        assert entry.status is EntryStatus.ERROR
        assert entry.error == MISSING_SOURCE
        assert op.details["missing"] == 1
        assert op.errors == 1
        assert stats.completed == 7

    @pytest.mark.asyncio
    async def test_resume_retries_errors(self, make_service, tmp_path):
        root = tmp_path / "docs"
        write_text_files(root, 3)
        embedder = MockEmbeddingPlugin(fail_on="File 1.")

        async with make_service(embedding_plugin=embedder) as service:
            first = await service.ingest_directory(root)
            again = await service.ingest_directory(root)
            embedder.fail_on = None
            resumed = await service.resume(ResumeScope(directory=str(root)))

        assert first.errors == 1
        assert again.errors == 1
        assert (resumed.completed, resumed.skipped, resumed.errors) == (1, 2, 0)

    @pytest.mark.asyncio
    async def test_resume_crawl_scope(self, make_service):
        def handler(request):
            if request.url.path == "/":
                body = '<html><body><main>home <a href="/a">a</a></main></body></html>'
            elif request.url.path == "/a":
                body = "<html><body><main>page a</main></body></html>"
            else:
                return httpx.Response(404)
            return httpx.Response(200, text=body, headers={"content-type": "text/html"})

        async with make_service(crawler_transport=httpx.MockTransport(handler)) as service:
            store = service.store
            await store.upsert(
                ManifestEntry.create("https://docs.test/a", "old").with_status(EntryStatus.PROCESSING)
            )
            await store.upsert(
                ManifestEntry.create("https://docs.test/gone", "old").with_status(EntryStatus.ERROR, error="x")
            )

            op = await service.resume(ResumeScope(url="https://docs.test/"))
            a = await store.get("https://docs.test/a")
            gone = await store.get("https://docs.test/gone")

        assert op.details["requeued"] == 2
        assert a.status is EntryStatus.COMPLETED
        assert gone.error == MISSING_SOURCE

    @pytest.mark.asyncio
    async def test_capped_crawl_resume_keeps_unreached_pages(self, make_service, config):
        def handler(request):
            path = request.url.path
            if path == "/":
                index = 0
            elif path.startswith("/p") and path[2:].isdigit():
                index = int(path[2:])
            else:
                return httpx.Response(404)
            if index >= 12:
                return httpx.Response(404)
            body = f'<html><body><main>page {index} body <a href="/p{index + 1}">next</a></main></body></html>'
            return httpx.Response(200, text=body, headers={"content-type": "text/html"})

        capped = config.model_copy(update={"crawler": CrawlerConfig(delay_seconds=0, max_pages=5)})
        embedder = MockEmbeddingPlugin(fail_on="page 10 body")
        failed_page = "https://chain.test/p10"

        async with make_service(
            embedding_plugin=embedder,
            crawler_transport=httpx.MockTransport(handler),
            config=capped,
        ) as service:
            crawl = await service.crawl_site("https://chain.test/", max_pages=12)
            embedder.fail_on = None

            short = await service.resume(ResumeScope(url="https://chain.test/"))
            after_short = await service.store.get(failed_page)

            full = await service.resume(ResumeScope(url="https://chain.test/"), max_pages=12)
            after_full = await service.store.get(failed_page)

        assert (crawl.completed, crawl.errors) == (11, 1)
        assert short.details["pages_processed"] == 5
        assert short.details["missing"] == 0
        assert after_short.status is EntryStatus.QUEUED
        assert full.details["pages_processed"] == 12
        assert full.details["missing"] == 0
        assert after_full.status is EntryStatus.COMPLETED
