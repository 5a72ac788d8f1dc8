"""Selectors for Airbnb search and listing pages.

Everything here reads an already rendered Playwright page and returns plain
values; missing elements come back as None and are cleaned up by the models.
"""

from __future__ import annotations

from urllib.parse import urljoin

from airbnb_scraper.config import AIRBNB_BASE_URL, FILLED_STAR_FILL

PAGINATION_SELECTOR = "nav[aria-label='Search results pagination'] a"
REVIEW_CARD_SELECTOR = "div[role='listitem']"

_SEARCH_CARDS_JS = """
() => {
    const cards = document.querySelectorAll("div[data-testid='card-container']");
    return Array.from(cards).map(card => {
        const text = sel => {
            const el = card.querySelector(sel);
            return el ? el.textContent : null;
        };
        const link = card.querySelector("a");
        return {
            name: text("div[data-testid='listing-card-subtitle']"),
            description: text("div[data-testid='listing-card-title']"),
            dates: text("div[data-testid='listing-card-subtitle']:nth-of-type(4) span span"),
            price: text("span div span"),
            url: link ? link.getAttribute("href") : null,
        };
    });
}
"""

_REVIEW_CARDS_JS = """
cards => cards.map(card => {
    const heading = card.querySelector("h3");
    const spans = card.querySelectorAll("span");
    const last = spans.length ? spans[spans.length - 1] : null;
    return {
        name: heading ? heading.textContent : null,
        fills: Array.from(card.querySelectorAll("svg")).map(svg => getComputedStyle(svg).fill),
        review: last ? last.textContent : null,
    };
})
"""


async def extract_pagination_links(page) -> list[str]:
    """Absolute hrefs of the pagination links, in the order they are shown."""
    hrefs = await page.eval_on_selector_all(
        PAGINATION_SELECTOR, "anchors => anchors.map(a => a.getAttribute('href'))"
    )
    # pages come back through the proxy, so relative links must be joined to the site
    return [urljoin(AIRBNB_BASE_URL, href) for href in hrefs if href]


async def extract_search_cards(page) -> list[dict]:
    """Raw {name, description, dates, price, url} dicts, one per listing card."""
    cards = await page.evaluate(_SEARCH_CARDS_JS)
    for card in cards:
        if card.get("url"):
            card["url"] = urljoin(AIRBNB_BASE_URL, card["url"])
    return cards


def count_filled_stars(fills: list[str], filled: str = FILLED_STAR_FILL) -> int:
    return sum(1 for fill in fills if fill == filled)


async def extract_review_cards(page) -> list[dict]:
    """Raw {name, stars, review} dicts, one per review card."""
    cards = await page.eval_on_selector_all(REVIEW_CARD_SELECTOR, _REVIEW_CARDS_JS)
    return [
        {
            "name": card.get("name"),
            "stars": count_filled_stars(card.get("fills") or []),
            "review": card.get("review"),
        }
        for card in cards
    ]
