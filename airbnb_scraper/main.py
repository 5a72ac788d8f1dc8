"""Crawl entry point.

Flow:
  1. For each keyword, scrape its search result pages into <keyword>.csv
  2. For each of those files, scrape the reviews of every listing into
     <listing name>.csv
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from airbnb_scraper.browser import BrowserPool
from airbnb_scraper.config import (
    CONFIG_FILE,
    MAX_OPEN_PAGES,
    CrawlSettings,
    load_api_key,
    setup_logging,
)
from airbnb_scraper.errors import ConfigError
from airbnb_scraper.reviews import process_results
from airbnb_scraper.search import crawl_keyword

logger = logging.getLogger(__name__)


async def crawl(pool, api_key: str, settings: CrawlSettings, skip_reviews: bool = False) -> list[Path]:
    """Run the search crawl for every keyword, then the review crawl for every result file.

    A failing keyword or file is logged and the rest carry on.
    Returns the search result files that were produced.
    """
    aggregate_files: list[Path] = []
    for keyword in settings.keywords:
        try:
            aggregate_files.append(await crawl_keyword(pool, keyword, api_key, settings))
        except Exception as e:
            logger.error('Error processing keyword "%s": %s', keyword, e)

    if skip_reviews:
        return aggregate_files

    for file in aggregate_files:
        if not file.exists():
            logger.warning("No search results were saved to %s", file)
            continue
        try:
            await process_results(pool, file, api_key, settings)
        except Exception as e:
            logger.error("Error processing file %s: %s", file, e)

    return aggregate_files


def build_parser() -> argparse.ArgumentParser:
    defaults = CrawlSettings()
    parser = argparse.ArgumentParser(description="Scrape Airbnb search results and listing reviews.")
    parser.add_argument(
        "--keyword",
        action="append",
        dest="keywords",
        help="Search location, may be repeated (default: %s)." % "; ".join(defaults.keywords),
    )
    parser.add_argument("--pages", type=int, default=defaults.pages,
                        help="Max search result pages per keyword (default: %(default)s).")
    parser.add_argument("--retries", type=int, default=defaults.retries,
                        help="Retries per search page (default: %(default)s).")
    parser.add_argument("--review-retries", type=int, default=defaults.review_retries,
                        help="Retries per listing page (default: %(default)s).")
    parser.add_argument("--search-threads", type=int, default=defaults.search_threads,
                        help="Search pages scraped at once (default: %(default)s).")
    parser.add_argument("--review-threads", type=int, default=defaults.review_threads,
                        help="Listings scraped at once (default: %(default)s).")
    parser.add_argument("--output-dir", type=Path, default=defaults.output_dir,
                        help="Where CSV files and scraper.log go (default: %(default)s).")
    parser.add_argument("--config", type=Path, default=CONFIG_FILE,
                        help="JSON file holding the ScrapeOps api_key (default: %(default)s).")
    parser.add_argument("--skip-reviews", action="store_true",
                        help="Only scrape search results.")
    parser.add_argument("--headful", action="store_true",
                        help="Show the browser window.")
    return parser


def settings_from_args(args: argparse.Namespace) -> CrawlSettings:
    settings = CrawlSettings(
        pages=args.pages,
        retries=args.retries,
        review_retries=args.review_retries,
        search_threads=args.search_threads,
        review_threads=args.review_threads,
        output_dir=args.output_dir,
    )
    if args.keywords:
        settings.keywords = args.keywords
    return settings


async def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)
    setup_logging(settings.output_dir)

    try:
        api_key = load_api_key(args.config)
    except ConfigError as e:
        logger.error("%s", e)
        return 0

    logger.info("Crawl starting...")
    max_open_pages = max(settings.search_threads, settings.review_threads, MAX_OPEN_PAGES)
    async with BrowserPool.launch(headless=not args.headful, max_open_pages=max_open_pages) as pool:
        files = await crawl(pool, api_key, settings, skip_reviews=args.skip_reviews)
    logger.info("Crawl complete. %d search result files written.", len(files))
    return 0


def run(argv: list[str] | None = None) -> int:
    try:
        return asyncio.run(main(argv))
    except KeyboardInterrupt:
        logger.warning("Crawl interrupted by user.")
        return 0
