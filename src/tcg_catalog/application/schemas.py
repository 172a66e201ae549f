"""Pydantic schemas for tcg_catalog API responses."""

from pydantic import BaseModel

from src.tcg_catalog.domain.models import CatalogItem, ItemGroup, MarketStat
from src.tcg_catalog.domain.search import format_collector_number


class SuggestItemOut(BaseModel):
    id: str
    name: str
    number: str | None
    display_number: str
    group_name: str
    group_total: int
    release_year: int | None
    image: str | None
    min_price_cents: int | None
    offers_count: int

    @classmethod
    def from_domain(cls, item: CatalogItem, stat: MarketStat | None) -> "SuggestItemOut":
        return cls(
            id=item.id,
            name=item.name,
            number=item.number,
            display_number=format_collector_number(item.number, item.printed_total),
            group_name=item.group_name or "",
            group_total=item.printed_total or 0,
            release_year=item.group_release_date.year if item.group_release_date else None,
            image=item.image_small,
            min_price_cents=stat.min_price_cents if stat else None,
            offers_count=stat.offers_count if stat else 0,
        )


class SuggestGroupOut(BaseModel):
    id: str
    name: str
    total: int | None
    year: int | None
    logo: str | None

    @classmethod
    def from_domain(cls, group: ItemGroup) -> "SuggestGroupOut":
        logo = group.logo.replace("http://", "https://") if group.logo else None
        return cls(
            id=group.id,
            name=group.name,
            total=group.total,
            year=group.release_date.year if group.release_date else None,
            logo=logo,
        )


class SuggestResponse(BaseModel):
    items: list[SuggestItemOut]
    groups: list[SuggestGroupOut]
