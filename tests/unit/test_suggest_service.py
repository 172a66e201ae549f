"""Unit tests for CatalogSuggestService."""

from contextlib import asynccontextmanager
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.tcg_catalog.application.service import CatalogSuggestService
from src.tcg_catalog.domain.models import CatalogItem, ItemGroup, MarketStat


@asynccontextmanager
async def _session():
    yield MagicMock()


def _item(item_id: str, name: str, released: date | None = None) -> CatalogItem:
    return CatalogItem(
        id=item_id, name=name, number="25", rarity="Common", supertype="Pokémon",
        image_small="img.png", group_id="g", group_name="Group", printed_total=102,
        group_release_date=released,
    )


@pytest.fixture
def reader():
    r = MagicMock()
    r.search_items = AsyncMock(return_value=[])
    r.search_groups = AsyncMock(return_value=[])
    r.get_market_stats = AsyncMock(return_value={})
    return r


class TestSuggest:
    async def test_short_query_returns_nothing(self, reader) -> None:
        svc = CatalogSuggestService(reader, session_factory=_session)
        resp = await svc.suggest("p")
        assert resp.items == [] and resp.groups == []
        reader.search_items.assert_not_called()

    async def test_text_query_prefers_prefix_matches(self, reader) -> None:
        reader.search_items.return_value = [
            _item("1", "Dark Pikachu"), _item("2", "Pikachu"), _item("3", "Pikachu V"),
        ]
        reader.get_market_stats.return_value = {"3": MarketStat("3", 4, 500, 600)}
        reader.search_groups.return_value = [
            ItemGroup("g1", "Pikachu Promos", 30, date(2020, 1, 1), "http://cdn/logo.png")
        ]
        svc = CatalogSuggestService(reader, session_factory=_session)
        resp = await svc.suggest("pika")
        assert [i.id for i in resp.items] == ["3", "2", "1"]
        assert resp.items[0].offers_count == 4
        assert resp.groups[0].logo == "https://cdn/logo.png"
        assert resp.groups[0].year == 2020

    async def test_numeric_query_sorts_newest_group_first(self) -> None:
        reader = _OrderingReader([
            _item("old", "Pikachu", date(1999, 1, 9)),
            _item("new", "Pikachu", date(2023, 3, 31)),
        ])
        svc = CatalogSuggestService(reader, session_factory=_session)
        resp = await svc.suggest("25/102")
        assert [i.id for i in resp.items] == ["new", "old"]
        assert resp.items[0].display_number == "025/102"
        assert reader.groups_searched is False

    async def test_numeric_query_keeps_newest_when_over_limit(self) -> None:
        rows = [_item(f"old{n}", f"Abra {n}", date(2000 + n, 1, 1)) for n in range(10)]
        rows.append(_item("newest", "Zapdos", date(2025, 1, 1)))
        reader = _OrderingReader(rows)
        svc = CatalogSuggestService(reader, session_factory=_session)
        resp = await svc.suggest("25")
        ids = [i.id for i in resp.items]
        assert len(ids) == 8
        assert ids[0] == "newest"
        assert ids[1:] == [f"old{n}" for n in range(9, 2, -1)]

    async def test_text_query_keeps_name_order(self) -> None:
        reader = _OrderingReader([
            _item("z", "Zapdos", date(2025, 1, 1)),
            _item("a", "Zapdos ex", date(1999, 1, 1)),
        ])
        svc = CatalogSuggestService(reader, session_factory=_session)
        resp = await svc.suggest("zapdos")
        assert [i.id for i in resp.items] == ["z", "a"]
        assert reader.newest_first_calls == [False]


class _OrderingReader:
    """Orders then limits, the way the SQL does."""

    def __init__(self, rows: list[CatalogItem]) -> None:
        self.rows = rows
        self.newest_first_calls: list[bool] = []
        self.groups_searched = False

    async def search_items(
        self, db, intent, group_ids, rarities, supertypes, limit, newest_first=False
    ) -> list[CatalogItem]:
        self.newest_first_calls.append(newest_first)
        by_name = sorted(self.rows, key=lambda i: (i.name, i.id))
        if newest_first:
            by_name.sort(key=lambda i: i.group_release_date or date.min, reverse=True)
        return by_name[:limit]

    async def search_groups(self, db, text, limit) -> list[ItemGroup]:
        self.groups_searched = True
        return []

    async def get_market_stats(self, db, item_ids=None) -> dict[str, MarketStat]:
        return {}
