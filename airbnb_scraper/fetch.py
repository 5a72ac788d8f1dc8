"""Fetch-with-retry for a single page, and windowed fan-out over many."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Iterable, Sequence

from airbnb_scraper.config import MAX_RETRIES, WAIT_UNTIL
from airbnb_scraper.errors import ScrapeFailedError

logger = logging.getLogger(__name__)


class FetchStatus(Enum):
    SUCCESS = "success"
    RETRYABLE = "retryable"
    TERMINAL = "terminal"


@dataclass
class FetchOutcome:
    """Result of one attempt at loading and extracting a page."""

    status: FetchStatus
    attempt: int
    records: list = field(default_factory=list)
    error: BaseException | None = None


async def _attempt(page, target_url: str, extract, attempt: int, retries: int,
                   navigated: bool) -> tuple[FetchOutcome, bool]:
    try:
        if navigated:
            await page.reload(wait_until=WAIT_UNTIL)
        else:
            await page.goto(target_url, wait_until=WAIT_UNTIL)
            navigated = True
        records = await extract(page)
    except Exception as e:
        status = FetchStatus.RETRYABLE if attempt <= retries else FetchStatus.TERMINAL
        return FetchOutcome(status, attempt, error=e), navigated
    return FetchOutcome(FetchStatus.SUCCESS, attempt, records=list(records)), navigated


async def scrape_with_retry(page, target_url: str, extract: Callable[[object], Awaitable[Iterable]],
                            pipeline, retries: int = MAX_RETRIES, label: str | None = None) -> list:
    """Load ``target_url`` in ``page`` and extract records, retrying up to ``retries`` times.

    The first attempt navigates to the target. Later attempts reload it, or
    navigate again if the page never got there. On success each record is
    passed to ``pipeline.add_data`` and the records are returned.

    Args:
        page: an open Playwright page owned by the caller.
        target_url: fully formed (proxied) URL to load.
        extract: coroutine function turning the loaded page into records.
        pipeline: DataPipeline receiving the records.
        retries: extra attempts after the first one.
        label: name used in log lines, defaults to target_url.

    Raises:
        ScrapeFailedError: all ``retries + 1`` attempts failed.
    """
    label = label or target_url
    retries = max(retries, 0)
    navigated = False
    outcome = None
    for attempt in range(1, retries + 2):
        outcome, navigated = await _attempt(page, target_url, extract, attempt, retries, navigated)
        if outcome.status is FetchStatus.SUCCESS:
            break
        logger.error("Error scraping data from %s (attempt %d/%d): %s",
                     label, attempt, retries + 1, outcome.error)

    if outcome.status is not FetchStatus.SUCCESS:
        raise ScrapeFailedError(label, outcome.attempt, outcome.error) from outcome.error

    for record in outcome.records:
        await pipeline.add_data(record)
    logger.info("Successfully scraped %d items from %s", len(outcome.records), label)
    return outcome.records


async def run_in_windows(items: Sequence, window_size: int, worker: Callable[[object], Awaitable],
                         label: str = "item", describe: Callable[[object], str] = str) -> list:
    """Run ``worker`` over ``items`` in windows of ``window_size`` concurrent tasks.

    A window is fully settled, failures included, before the next one starts.
    A failing item is logged and its exception is returned in its slot of the
    result list; it never cancels the other items.
    """
    if window_size < 1:
        raise ValueError("window_size must be at least 1")

    results: list = []
    for start in range(0, len(items), window_size):
        window = items[start:start + window_size]
        settled = await asyncio.gather(*(worker(item) for item in window), return_exceptions=True)
        for item, result in zip(window, settled):
            if isinstance(result, Exception):
                logger.error("Error processing %s %s: %s", label, describe(item), result)
        results.extend(settled)
    return results
