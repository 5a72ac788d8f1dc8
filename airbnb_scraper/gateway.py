"""ScrapeOps proxy URLs."""

from __future__ import annotations

from urllib.parse import urlencode

from airbnb_scraper.config import LOCATION, PROXY_ENDPOINT, PROXY_WAIT, SEARCH_BASE_URL


def get_scrapeops_url(url: str, api_key: str, location: str = LOCATION, wait: int = PROXY_WAIT) -> str:
    """Wrap a target URL so it is fetched and rendered through the proxy."""
    params = {
        "api_key": api_key,
        "url": url,
        "country": location,
        "wait": wait,
    }
    return f"{PROXY_ENDPOINT}?{urlencode(params)}"


def search_url(keyword: str) -> str:
    """First search results page for a keyword.

    "Myrtle Beach, South Carolina" -> .../s/Myrtle-Beach--South-Carolina/homes
    """
    formatted_keyword = keyword.replace(", ", "--").replace(" ", "-")
    return SEARCH_BASE_URL.format(keyword=formatted_keyword)
