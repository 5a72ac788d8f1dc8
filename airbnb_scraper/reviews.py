"""Listing crawl: visit every search result and write its reviews to CSV."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from airbnb_scraper.config import CrawlSettings
from airbnb_scraper.errors import ScrapeFailedError
from airbnb_scraper.extractor import extract_review_cards
from airbnb_scraper.fetch import run_in_windows, scrape_with_retry
from airbnb_scraper.gateway import get_scrapeops_url
from airbnb_scraper.models import ReviewData
from airbnb_scraper.pipeline import DataPipeline, read_batch_file

logger = logging.getLogger(__name__)


def review_filename(name: str) -> str:
    """Whitespace runs and path separators become dashes: "Ocean View 2/1" -> Ocean-View-2-1.csv."""
    return re.sub(r"[\\/]", "-", re.sub(r"\s+", "-", name)) + ".csv"


def unique_review_filenames(rows: list[dict]) -> list[str]:
    """One review filename per row, suffixed with -2, -3... when names collide."""
    used: set[str] = set()
    filenames = []
    for row in rows:
        filename = review_filename((row.get("name") or "").strip() or "No name")
        stem, n = filename[:-len(".csv")], 1
        while filename.lower() in used:
            n += 1
            filename = f"{stem}-{n}.csv"
        used.add(filename.lower())
        filenames.append(filename)
    return filenames


async def review_records(page) -> list[ReviewData]:
    return [
        ReviewData(name=card.get("name"), stars=card.get("stars"), review=card.get("review"))
        for card in await extract_review_cards(page)
    ]


async def process_listing(pool, row: dict, api_key: str, settings: CrawlSettings,
                          csv_filename: str | None = None) -> int:
    """Scrape the reviews of one search result row.

    The row's review file is flushed even when the retries run out; in that
    case ScrapeFailedError is re-raised for the caller to log.
    ``csv_filename`` defaults to the one derived from the row name.
    Returns the number of reviews extracted.
    """
    url = (row.get("url") or "").strip()
    name = (row.get("name") or "").strip() or "No name"
    if not url.startswith("http"):
        logger.warning("Skipping %s: no listing url", name)
        return 0

    review_pipeline = DataPipeline(
        csv_filename or review_filename(name),
        storage_queue_limit=settings.storage_queue_limit,
        output_dir=settings.output_dir,
    )
    try:
        async with pool.page() as page:
            reviews = await scrape_with_retry(
                page, get_scrapeops_url(url, api_key, settings.location), review_records,
                review_pipeline, retries=settings.review_retries, label=url,
            )
    except ScrapeFailedError:
        logger.error("Max retries exceeded for %s.", url)
        raise
    finally:
        await review_pipeline.close_pipeline()
    return len(reviews)


async def process_results(pool, file: Path | str, api_key: str, settings: CrawlSettings) -> None:
    """Scrape reviews for every row of a search results CSV."""
    logger.info("Processing %s", file)
    rows = read_batch_file(file)
    jobs = list(zip(rows, unique_review_filenames(rows)))

    async def process(job):
        row, csv_filename = job
        return await process_listing(pool, row, api_key, settings, csv_filename)

    await run_in_windows(jobs, settings.review_threads, process, label="listing",
                         describe=lambda job: job[0].get("url") or job[0].get("name"))
    logger.info("Processing complete for %s (%d listings).", file, len(rows))
