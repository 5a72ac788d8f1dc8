"""Search results crawl: find the result pages for a keyword and scrape them."""

from __future__ import annotations

import logging
from pathlib import Path

from airbnb_scraper.config import LOCATION, PAGES, WAIT_UNTIL, CrawlSettings
from airbnb_scraper.extractor import extract_pagination_links, extract_search_cards
from airbnb_scraper.fetch import run_in_windows, scrape_with_retry
from airbnb_scraper.gateway import get_scrapeops_url, search_url
from airbnb_scraper.models import SearchData
from airbnb_scraper.pipeline import DataPipeline

logger = logging.getLogger(__name__)


def search_filename(keyword: str) -> str:
    return f"{keyword.replace(', ', '-').replace(' ', '-')}.csv"


async def find_pagination_urls(pool, keyword: str, api_key: str, pages: int = PAGES,
                               location: str = LOCATION) -> list[str]:
    """First results page for ``keyword`` followed by up to ``pages - 1`` more.

    If the first page cannot be loaded only its own URL is returned.
    """
    url = search_url(keyword)
    links = [url]
    try:
        async with pool.page() as page:
            await page.goto(get_scrapeops_url(url, api_key, location), wait_until=WAIT_UNTIL)
            pagination_links = await extract_pagination_links(page)
            links.extend(pagination_links[:max(pages - 1, 0)])
    except Exception as e:
        logger.error("Error fetching pagination URLs for %s: %s", keyword, e)

    logger.info("Pagination links collected for %s: %d", keyword, len(links))
    return links


async def search_records(page) -> list[SearchData]:
    return [
        SearchData(
            name=card.get("name"),
            description=card.get("description"),
            dates=card.get("dates"),
            price=card.get("price"),
            url=card.get("url"),
        )
        for card in await extract_search_cards(page)
    ]


async def scrape_search_results(pool, url: str, data_pipeline: DataPipeline, api_key: str,
                                retries: int, location: str = LOCATION) -> list[SearchData]:
    async with pool.page() as page:
        return await scrape_with_retry(
            page, get_scrapeops_url(url, api_key, location), search_records,
            data_pipeline, retries=retries, label=url,
        )


async def crawl_keyword(pool, keyword: str, api_key: str, settings: CrawlSettings) -> Path:
    """Scrape every results page for one keyword into one CSV file.

    Returns the path of that file. Pages that fail after all retries are
    logged and skipped.
    """
    data_pipeline = DataPipeline(
        search_filename(keyword),
        storage_queue_limit=settings.storage_queue_limit,
        output_dir=settings.output_dir,
    )
    page_urls = await find_pagination_urls(pool, keyword, api_key, settings.pages, settings.location)

    async def scrape(url):
        return await scrape_search_results(pool, url, data_pipeline, api_key,
                                           settings.retries, settings.location)

    await run_in_windows(page_urls, settings.search_threads, scrape, label="search page")
    await data_pipeline.close_pipeline()
    return data_pipeline.path
