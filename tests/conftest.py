"""Fake Playwright pages served from an in-memory site."""

from contextlib import asynccontextmanager
from urllib.parse import parse_qs, urlparse

import pytest

from airbnb_scraper.extractor import PAGINATION_SELECTOR, REVIEW_CARD_SELECTOR


def target_of(proxied_url: str) -> str:
    """Original URL carried in a ScrapeOps proxy URL."""
    return parse_qs(urlparse(proxied_url).query)["url"][0]


class FakePage:
    """Answers the calls the extractor makes, from ``site[url]``.

    A site entry may hold "pagination" (list of hrefs), "cards" (search card
    dicts), "reviews" (review card dicts with "fills") and "fail" (raise on
    every extraction).
    """

    def __init__(self, site: dict):
        self.site = site
        self.url = None
        self.gotos = []
        self.reloads = 0
        self.closed = False

    async def goto(self, url, wait_until=None):
        self.gotos.append(url)
        target = target_of(url)
        if target not in self.site:
            raise RuntimeError(f"net::ERR_NAME_NOT_RESOLVED at {target}")
        self.url = target

    async def reload(self, wait_until=None):
        self.reloads += 1

    def _content(self):
        content = self.site[self.url]
        if content.get("fail"):
            raise RuntimeError(f"Timeout waiting for content on {self.url}")
        return content

    async def evaluate(self, script):
        return [dict(card) for card in self._content().get("cards", [])]

    async def eval_on_selector_all(self, selector, script):
        content = self._content()
        if selector == PAGINATION_SELECTOR:
            return list(content.get("pagination", []))
        if selector == REVIEW_CARD_SELECTOR:
            return [dict(card) for card in content.get("reviews", [])]
        raise AssertionError(f"unexpected selector {selector}")


class FakePool:
    def __init__(self, site: dict):
        self.site = site
        self.pages = []

    @asynccontextmanager
    async def page(self):
        page = FakePage(self.site)
        self.pages.append(page)
        try:
            yield page
        finally:
            page.closed = True


@pytest.fixture
def fake_pool_factory():
    return FakePool
