"""Record types written to the CSV files."""

from __future__ import annotations

from dataclasses import dataclass, fields


def _clean(value, field_name: str) -> str:
    """Trim a scraped string, or fall back to "No <field_name>" when blank."""
    if value is None:
        return f"No {field_name}"
    value = str(value).strip()
    return value or f"No {field_name}"


@dataclass(frozen=True)
class SearchData:
    """One listing card from a search results page."""

    name: str = ""
    description: str = ""
    dates: str = ""
    price: str = ""
    url: str = ""

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, _clean(getattr(self, f.name), f.name))

    @property
    def key(self) -> str:
        return self.name


@dataclass(frozen=True)
class ReviewData:
    """One review on a listing page."""

    name: str = ""
    stars: int = 0
    review: str = ""

    def __post_init__(self):
        object.__setattr__(self, "name", _clean(self.name, "name"))
        object.__setattr__(self, "review", _clean(self.review, "review"))
        try:
            stars = int(self.stars or 0)
        except (TypeError, ValueError):
            stars = 0
        object.__setattr__(self, "stars", max(stars, 0))

    @property
    def key(self) -> str:
        return self.name


def field_names(record_type) -> list[str]:
    """CSV column order for a record type."""
    return [f.name for f in fields(record_type)]
