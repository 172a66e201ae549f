"""Pydantic response models for tcg_marketplace."""

from pydantic import BaseModel

from src.tcg_common.cents import cents_to_display
from src.tcg_marketplace.domain.models import MarketPage, RankedItem


class MarketItemOut(BaseModel):
    id: str
    name: str
    number: str | None
    display_number: str
    subtitle: str
    rarity: str | None
    supertype: str | None
    image_small: str | None
    group_id: str | None
    group_name: str | None
    active_listings: int
    min_price_cents: int | None
    min_price_display: str | None
    score_popular: int

    @classmethod
    def from_domain(cls, item: RankedItem) -> "MarketItemOut":
        return cls(
            id=item.id,
            name=item.name,
            number=item.number,
            display_number=item.display_number,
            subtitle=item.subtitle,
            rarity=item.rarity,
            supertype=item.supertype,
            image_small=item.image_small,
            group_id=item.group_id,
            group_name=item.group_name,
            active_listings=item.active_listings,
            min_price_cents=item.min_price_cents,
            min_price_display=(
                cents_to_display(item.min_price_cents)
                if item.min_price_cents is not None
                else None
            ),
            score_popular=item.score_popular,
        )


class MarketPageResponse(BaseModel):
    items: list[MarketItemOut]
    total: int
    total_pages: int
    page: int
    page_size: int

    @classmethod
    def from_domain(cls, page: MarketPage) -> "MarketPageResponse":
        return cls(
            items=[MarketItemOut.from_domain(i) for i in page.items],
            total=page.total,
            total_pages=page.total_pages,
            page=page.page,
            page_size=page.page_size,
        )
