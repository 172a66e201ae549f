"""CatalogSuggestService — typeahead over catalog items and groups.

Read-only. Numeric queries (see domain.search) go straight to the item
number lookup; free text searches item names and group names concurrently,
each on its own session.
"""

import asyncio

from src.tcg_catalog.application.schemas import (
    SuggestGroupOut,
    SuggestItemOut,
    SuggestResponse,
)
from src.tcg_catalog.domain.models import CatalogItem, ItemGroup
from src.tcg_catalog.domain.repository import CatalogReaderProtocol
from src.tcg_catalog.domain.search import SearchIntent, parse_search
from src.tcg_catalog.infrastructure.persistence import CatalogReader
from src.tcg_common.database import SessionFactory, async_session_factory

MIN_QUERY_LENGTH = 2
MAX_ITEMS = 8
MAX_GROUPS = 3


class CatalogSuggestService:
    def __init__(
        self,
        reader: CatalogReaderProtocol | None = None,
        session_factory: SessionFactory | None = None,
    ) -> None:
        self._reader: CatalogReaderProtocol = reader or CatalogReader()
        self._session_factory: SessionFactory = session_factory or async_session_factory

    async def suggest(self, query: str) -> SuggestResponse:
        q = (query or "").strip()
        if len(q) < MIN_QUERY_LENGTH:
            return SuggestResponse(items=[], groups=[])

        intent = parse_search(q)
        groups: list[ItemGroup] = []
        if intent.is_numeric:
            items = await self._search_items(intent, newest_first=True)
        else:
            items, groups = await asyncio.gather(
                self._search_items(intent), self._search_groups(q)
            )
        items = items[:MAX_ITEMS]

        async with self._session_factory() as db:
            stats = await self._reader.get_market_stats(db, [i.id for i in items])

        out = [SuggestItemOut.from_domain(i, stats.get(i.id)) for i in items]
        if not intent.is_numeric:
            out.sort(key=lambda o: (_match_rank(o.name, q), -o.offers_count))
        return SuggestResponse(
            items=out, groups=[SuggestGroupOut.from_domain(g) for g in groups]
        )

    async def _search_items(
        self, intent: SearchIntent, newest_first: bool = False
    ) -> list[CatalogItem]:
        async with self._session_factory() as db:
            return await self._reader.search_items(
                db, intent, None, None, None, limit=MAX_ITEMS, newest_first=newest_first
            )

    async def _search_groups(self, text: str) -> list[ItemGroup]:
        async with self._session_factory() as db:
            return await self._reader.search_groups(db, text, limit=MAX_GROUPS)


def _match_rank(name: str, query: str) -> int:
    """0 = prefix match, 1 = substring match, 2 = neither."""
    name_l, q_l = name.lower(), query.lower()
    if name_l.startswith(q_l):
        return 0
    if q_l in name_l:
        return 1
    return 2
