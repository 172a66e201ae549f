"""Domain models for tcg_catalog — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import date


@dataclass
class ItemGroup:
    """A printed set / expansion that catalog items belong to."""

    id: str
    name: str
    total: int | None
    release_date: date | None = None
    logo: str | None = None


@dataclass
class CatalogItem:
    id: str
    name: str
    number: str | None
    rarity: str | None
    supertype: str | None
    image_small: str | None
    group_id: str | None
    group_name: str | None
    printed_total: int | None  # falls back to the group's total
    group_release_date: date | None = None


@dataclass
class MarketStat:
    """Per-item aggregate over ACTIVE listings only."""

    item_id: str
    offers_count: int
    min_price_cents: int | None
    avg_price_cents: int | None
