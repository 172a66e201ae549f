"""Marketplace ranking — pure join / filter / sort / paginate.

Inputs are already-fetched maps keyed by item id; nothing here touches I/O.

    score_popular = offers * 2 + views_7d * 1 + clicks_7d * 3

Sort orders (every tab ends with name ascending):
    popular        score desc, offers desc
    most_listed    offers desc, min price asc (no price last)
    lowest_price   min price asc (no price last)
    highest_price  min price desc (no price counts as 0)
"""

import math
from collections.abc import Callable, Iterable, Mapping

from src.tcg_catalog.domain.models import CatalogItem, MarketStat
from src.tcg_catalog.domain.search import (
    format_collector_number,
    format_item_subtitle,
    matches,
    parse_search,
)
from src.tcg_common.enums import MarketTab
from src.tcg_marketplace.domain.models import MarketPage, MarketQuery, RankedItem

OFFER_WEIGHT = 2
VIEW_WEIGHT = 1
CLICK_WEIGHT = 3


def popularity_score(offers: int, views: int, clicks: int) -> int:
    return offers * OFFER_WEIGHT + views * VIEW_WEIGHT + clicks * CLICK_WEIGHT


def decorate(
    item: CatalogItem,
    stat: MarketStat | None,
    views: int,
    clicks: int,
) -> RankedItem:
    offers = stat.offers_count if stat else 0
    return RankedItem(
        id=item.id,
        name=item.name,
        number=item.number,
        rarity=item.rarity,
        supertype=item.supertype,
        image_small=item.image_small,
        group_id=item.group_id,
        group_name=item.group_name,
        printed_total=item.printed_total,
        display_number=format_collector_number(item.number, item.printed_total),
        subtitle=format_item_subtitle(item.number, item.printed_total, item.group_name),
        active_listings=offers,
        min_price_cents=stat.min_price_cents if stat else None,
        score_popular=popularity_score(offers, views, clicks),
        views_7d=views,
        clicks_7d=clicks,
    )


def apply_filters(items: Iterable[RankedItem], query: MarketQuery) -> list[RankedItem]:
    out = list(items)
    intent = parse_search(query.search)
    if not intent.is_empty:
        out = [i for i in out if matches(intent, i.number, i.printed_total, i.name)]
    if query.only_with_listings:
        out = [i for i in out if i.active_listings > 0]
    if query.price_min_cents is not None or query.price_max_cents is not None:
        out = [i for i in out if i.min_price_cents is not None]
    if query.price_min_cents is not None:
        out = [i for i in out if i.min_price_cents >= query.price_min_cents]  # type: ignore[operator]
    if query.price_max_cents is not None:
        out = [i for i in out if i.min_price_cents <= query.price_max_cents]  # type: ignore[operator]
    return out


def _price_or_inf(item: RankedItem) -> float:
    return item.min_price_cents if item.min_price_cents is not None else math.inf


def _name_key(item: RankedItem) -> tuple[str, str]:
    return item.name.casefold(), item.name


_SORT_KEYS: dict[MarketTab, Callable[[RankedItem], tuple]] = {
    MarketTab.POPULAR: lambda i: (-i.score_popular, -i.active_listings, _name_key(i)),
    MarketTab.MOST_LISTED: lambda i: (-i.active_listings, _price_or_inf(i), _name_key(i)),
    MarketTab.LOWEST_PRICE: lambda i: (_price_or_inf(i), _name_key(i)),
    MarketTab.HIGHEST_PRICE: lambda i: (-(i.min_price_cents or 0), _name_key(i)),
}


def sort_items(items: Iterable[RankedItem], tab: MarketTab) -> list[RankedItem]:
    return sorted(items, key=_SORT_KEYS[MarketTab(tab)])


def paginate(items: list[RankedItem], page: int, page_size: int) -> MarketPage:
    total = len(items)
    start = page * page_size
    return MarketPage(
        items=items[start:start + page_size],
        total=total,
        total_pages=math.ceil(total / page_size) if page_size > 0 else 0,
        page=page,
        page_size=page_size,
    )


def rank(
    items: Iterable[CatalogItem],
    stats: Mapping[str, MarketStat],
    views: Mapping[str, int],
    clicks: Mapping[str, int],
    query: MarketQuery,
) -> MarketPage:
    """Join the three sources, filter, sort by tab and cut one page."""
    decorated = [
        decorate(item, stats.get(item.id), views.get(item.id, 0), clicks.get(item.id, 0))
        for item in items
    ]
    filtered = apply_filters(decorated, query)
    return paginate(sort_items(filtered, query.tab), query.page, query.page_size)
