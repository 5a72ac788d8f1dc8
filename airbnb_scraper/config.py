"""Settings: crawl limits, paths and the proxy credential."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from airbnb_scraper.errors import ConfigError

# --- Crawl limits ---
LOCATION = "us"
MAX_RETRIES = 2
REVIEW_RETRIES = 2  # 3 attempts per listing
MAX_SEARCH_DATA_THREADS = 2
MAX_REVIEW_DATA_THREADS = 5
MAX_OPEN_PAGES = 5
PAGES = 4
STORAGE_QUEUE_LIMIT = 50

KEYWORD_LIST = ["Myrtle Beach, South Carolina, United States"]

# --- Proxy / browser ---
PROXY_ENDPOINT = "https://proxy.scrapeops.io/v1/"
PROXY_WAIT = 5000  # ms the proxy waits for the page to render
NAVIGATION_TIMEOUT = 90000  # ms, the proxy render is slow
WAIT_UNTIL = "load"
AIRBNB_BASE_URL = "https://www.airbnb.com"
SEARCH_BASE_URL = AIRBNB_BASE_URL + "/s/{keyword}/homes"
FILLED_STAR_FILL = "rgb(34, 34, 34)"

USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/138.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/16.1 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/112.0.5615.49 Safari/537.36",
]

# --- Paths ---
CONFIG_FILE = Path("config.json")
OUTPUT_DIR = Path("scraping_output")
LOG_FILE = "scraper.log"


def load_api_key(path: Path | str = CONFIG_FILE) -> str:
    """Read the ScrapeOps api_key from a JSON config file.

    Raises:
        ConfigError: the file is missing, is not valid JSON or has no api_key.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e

    api_key = data.get("api_key") if isinstance(data, dict) else None
    if not api_key or not str(api_key).strip():
        raise ConfigError(f"No api_key in {path}")
    return str(api_key).strip()


def setup_logging(output_dir: Path | str = OUTPUT_DIR, level: int = logging.INFO) -> None:
    """Log to stdout and to scraper.log in the output directory."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(output_dir / LOG_FILE, encoding="utf-8"),
        ],
        force=True,
    )


@dataclass
class CrawlSettings:
    """Knobs for one run; defaults come from the constants above."""

    keywords: list[str] = field(default_factory=lambda: list(KEYWORD_LIST))
    pages: int = PAGES
    retries: int = MAX_RETRIES
    review_retries: int = REVIEW_RETRIES
    search_threads: int = MAX_SEARCH_DATA_THREADS
    review_threads: int = MAX_REVIEW_DATA_THREADS
    storage_queue_limit: int = STORAGE_QUEUE_LIMIT
    output_dir: Path = OUTPUT_DIR
    location: str = LOCATION
