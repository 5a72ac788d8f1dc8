"""Exceptions raised by the scraper."""

from __future__ import annotations


class ScraperError(Exception):
    """Base class for scraper errors."""


class ConfigError(ScraperError):
    """config.json is missing or has no usable api_key."""


class ScrapeFailedError(ScraperError):
    """A single target could not be scraped within its retry budget."""

    def __init__(self, url: str, attempts: int, last_error: BaseException | None = None):
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Failed to scrape {url} after {attempts} attempts: {last_error}")
