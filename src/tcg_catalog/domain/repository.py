# src/tcg_catalog/domain/repository.py
"""Catalog Reader Protocol — read-only access to items, groups and market stats.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.tcg_catalog.domain.models import CatalogItem, ItemGroup, MarketStat
from src.tcg_catalog.domain.search import SearchIntent


class CatalogReaderProtocol(Protocol):
    async def search_items(
        self,
        db: AsyncSession,
        intent: SearchIntent,
        group_ids: list[str] | None,
        rarities: list[str] | None,
        supertypes: list[str] | None,
        limit: int,
        newest_first: bool = False,
    ) -> list[CatalogItem]: ...

    async def get_items_by_ids(
        self, db: AsyncSession, item_ids: list[str]
    ) -> list[CatalogItem]: ...

    async def search_groups(
        self, db: AsyncSession, text: str, limit: int
    ) -> list[ItemGroup]: ...

    async def get_market_stats(
        self, db: AsyncSession, item_ids: list[str] | None = None
    ) -> dict[str, MarketStat]: ...
