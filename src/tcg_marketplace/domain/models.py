"""Domain models for tcg_marketplace — query-scoped, never persisted."""

from dataclasses import dataclass, field

from src.tcg_common.enums import MarketTab


@dataclass(frozen=True)
class MarketQuery:
    search: str = ""
    tab: MarketTab = MarketTab.POPULAR
    groups: tuple[str, ...] = ()
    rarities: tuple[str, ...] = ()
    supertypes: tuple[str, ...] = ()
    price_min_cents: int | None = None
    price_max_cents: int | None = None
    only_with_listings: bool = False
    page: int = 0
    page_size: int = 24


@dataclass
class RankedItem:
    id: str
    name: str
    number: str | None
    rarity: str | None
    supertype: str | None
    image_small: str | None
    group_id: str | None
    group_name: str | None
    printed_total: int | None
    display_number: str
    subtitle: str
    active_listings: int
    min_price_cents: int | None
    score_popular: int
    views_7d: int = 0
    clicks_7d: int = 0


@dataclass
class MarketPage:
    items: list[RankedItem] = field(default_factory=list)
    total: int = 0
    total_pages: int = 0
    page: int = 0
    page_size: int = 0
