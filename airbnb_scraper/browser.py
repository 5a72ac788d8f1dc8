"""One shared Chromium browser, handing out a fresh page per task."""

from __future__ import annotations

import asyncio
import logging
import random
from contextlib import asynccontextmanager

from playwright.async_api import async_playwright

from airbnb_scraper.config import MAX_OPEN_PAGES, NAVIGATION_TIMEOUT, USER_AGENTS

logger = logging.getLogger(__name__)


class BrowserPool:
    """Shares one browser between concurrent tasks.

    Each ``page()`` gets its own context, so cookies and headers are never
    shared between tasks, and both are closed when the block exits, whether it
    raised or not. At most ``max_open_pages`` pages are open at once.
    """

    def __init__(self, browser, max_open_pages: int = MAX_OPEN_PAGES):
        self.browser = browser
        self._semaphore = asyncio.Semaphore(max_open_pages)

    @classmethod
    @asynccontextmanager
    async def launch(cls, headless: bool = True, max_open_pages: int = MAX_OPEN_PAGES):
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=headless)
            logger.info("Browser launched (headless=%s)", headless)
            try:
                yield cls(browser, max_open_pages=max_open_pages)
            finally:
                await browser.close()
                logger.info("Browser closed")

    @asynccontextmanager
    async def page(self):
        async with self._semaphore:
            context = await self.browser.new_context(
                user_agent=random.choice(USER_AGENTS),
                locale="en-US",
                viewport={"width": 1280, "height": 800},
            )
            try:
                page = await context.new_page()
                page.set_default_navigation_timeout(NAVIGATION_TIMEOUT)
                try:
                    yield page
                finally:
                    await page.close()
            finally:
                await context.close()
