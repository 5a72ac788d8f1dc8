"""Tests for scrape_with_retry and run_in_windows."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from airbnb_scraper.errors import ScrapeFailedError
from airbnb_scraper.fetch import run_in_windows, scrape_with_retry
from airbnb_scraper.models import SearchData
from airbnb_scraper.pipeline import DataPipeline


def _page():
    page = MagicMock()
    page.goto = AsyncMock()
    page.reload = AsyncMock()
    return page


class TestScrapeWithRetry:

    def test_succeeds_on_third_attempt(self, tmp_path):
        page = _page()
        pipeline = DataPipeline("out.csv", output_dir=tmp_path)
        third = [SearchData(name="A"), SearchData(name="B")]
        extract = AsyncMock(side_effect=[RuntimeError("no cards"), RuntimeError("no cards"), third])

        records = asyncio.run(scrape_with_retry(page, "https://proxy/x", extract, pipeline, retries=2))

        assert records == third
        assert page.goto.await_count == 1
        assert page.reload.await_count == 2
        assert extract.await_count == 3
        assert [r.name for r in pipeline.storage_queue] == ["A", "B"]

    def test_raises_after_all_attempts(self, tmp_path):
        page = _page()
        pipeline = DataPipeline("out.csv", output_dir=tmp_path)
        extract = AsyncMock(side_effect=RuntimeError("timeout"))

        with pytest.raises(ScrapeFailedError) as exc_info:
            asyncio.run(scrape_with_retry(page, "https://proxy/x", extract, pipeline, retries=2))

        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.last_error, RuntimeError)
        assert extract.await_count == 3
        assert page.reload.await_count == 2
        assert pipeline.storage_queue == []

    def test_failed_navigation_is_retried_with_goto(self, tmp_path):
        page = _page()
        page.goto.side_effect = [RuntimeError("net::ERR_TIMED_OUT"), None]
        pipeline = DataPipeline("out.csv", output_dir=tmp_path)
        extract = AsyncMock(return_value=[SearchData(name="A")])

        asyncio.run(scrape_with_retry(page, "https://proxy/x", extract, pipeline, retries=2))

        assert page.goto.await_count == 2
        page.reload.assert_not_awaited()
        assert extract.await_count == 1

    def test_no_retries(self, tmp_path):
        page = _page()
        pipeline = DataPipeline("out.csv", output_dir=tmp_path)
        extract = AsyncMock(side_effect=RuntimeError("timeout"))

        with pytest.raises(ScrapeFailedError):
            asyncio.run(scrape_with_retry(page, "https://proxy/x", extract, pipeline, retries=0))
        page.reload.assert_not_awaited()

    def test_empty_page_is_a_success(self, tmp_path):
        page = _page()
        pipeline = DataPipeline("out.csv", output_dir=tmp_path)
        extract = AsyncMock(return_value=[])

        assert asyncio.run(scrape_with_retry(page, "https://proxy/x", extract, pipeline)) == []
        page.reload.assert_not_awaited()


class TestRunInWindows:

    def test_failure_does_not_stop_siblings(self, tmp_path):
        pipeline = DataPipeline("out.csv", output_dir=tmp_path)
        good, bad = _page(), _page()

        async def worker(item):
            page, extract = item
            return await scrape_with_retry(page, "https://proxy/x", extract, pipeline, retries=2)

        items = [
            (bad, AsyncMock(side_effect=RuntimeError("timeout"))),
            (good, AsyncMock(return_value=[SearchData(name="A")])),
        ]
        results = asyncio.run(run_in_windows(items, 2, worker, label="page"))

        assert isinstance(results[0], ScrapeFailedError)
        assert results[1] == [SearchData(name="A")]
        assert [r.name for r in pipeline.storage_queue] == ["A"]

    def test_windows_run_one_after_another(self):
        events = []

        async def worker(n):
            events.append(("start", n))
            await asyncio.sleep(0.01 * (3 - n % 3))
            events.append(("end", n))
            if n == 1:
                raise RuntimeError("boom")
            return n

        results = asyncio.run(run_in_windows(list(range(5)), 2, worker))

        assert results[0] == 0 and results[2:] == [2, 3, 4]
        assert isinstance(results[1], RuntimeError)
        # every item of window N ends before any item of window N+1 starts
        position = {event: i for i, event in enumerate(events)}
        for prev, nxt in [((0, 1), (2, 3)), ((2, 3), (4,))]:
            last_end = max(position[("end", n)] for n in prev)
            first_start = min(position[("start", n)] for n in nxt)
            assert last_end < first_start

    def test_window_size_must_be_positive(self):
        with pytest.raises(ValueError):
            asyncio.run(run_in_windows([1], 0, AsyncMock()))
