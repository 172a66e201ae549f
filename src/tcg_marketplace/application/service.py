"""MarketplaceService — ranked, filtered, paginated catalog browsing.

Four independent reads run concurrently, each on its own session:
  1. market stats (active offer count + min price per item)
  2. item views over the telemetry window
  3. buy clicks over the telemetry window
  4. catalog items matching the structural search + facet filters

Telemetry is best-effort: a failing read counts as zero activity and the
page is still served. Catalog and stats failures propagate.
"""

import asyncio
import logging

from config.settings import settings
from src.tcg_catalog.domain.models import CatalogItem, MarketStat
from src.tcg_catalog.domain.repository import CatalogReaderProtocol
from src.tcg_catalog.domain.search import parse_search
from src.tcg_catalog.infrastructure.persistence import CatalogReader
from src.tcg_common.database import SessionFactory, async_session_factory
from src.tcg_common.datetime_utils import days_ago
from src.tcg_common.enums import UsageEventKind
from src.tcg_marketplace.domain.models import MarketPage, MarketQuery
from src.tcg_marketplace.domain.ranking import rank
from src.tcg_marketplace.domain.repository import TelemetryReaderProtocol
from src.tcg_marketplace.infrastructure.telemetry import TelemetryReader

logger = logging.getLogger(__name__)


class MarketplaceService:
    def __init__(
        self,
        catalog: CatalogReaderProtocol | None = None,
        telemetry: TelemetryReaderProtocol | None = None,
        session_factory: SessionFactory | None = None,
        window_days: int | None = None,
        catalog_limit: int | None = None,
    ) -> None:
        self._catalog: CatalogReaderProtocol = catalog or CatalogReader()
        self._telemetry: TelemetryReaderProtocol = telemetry or TelemetryReader()
        self._session_factory: SessionFactory = session_factory or async_session_factory
        self._window_days = (
            window_days if window_days is not None else settings.TELEMETRY_WINDOW_DAYS
        )
        self._catalog_limit = (
            catalog_limit if catalog_limit is not None else settings.MARKET_CATALOG_LIMIT
        )

    async def browse(self, query: MarketQuery) -> MarketPage:
        stats, views, clicks, items = await asyncio.gather(
            self._stats(),
            self._safe_counts(UsageEventKind.ITEM_VIEWED),
            self._safe_counts(UsageEventKind.BUY_CLICKED),
            self._items(query),
        )
        page = rank(items, stats, views, clicks, query)
        logger.debug(
            "Marketplace browse tab=%s search=%r matched=%d page=%d",
            query.tab, query.search, page.total, query.page,
        )
        return page

    async def _stats(self) -> dict[str, MarketStat]:
        async with self._session_factory() as db:
            return await self._catalog.get_market_stats(db)

    async def _items(self, query: MarketQuery) -> list[CatalogItem]:
        async with self._session_factory() as db:
            return await self._catalog.search_items(
                db,
                parse_search(query.search),
                list(query.groups) or None,
                list(query.rarities) or None,
                list(query.supertypes) or None,
                limit=self._catalog_limit,
            )

    async def _safe_counts(self, kind: UsageEventKind) -> dict[str, int]:
        since = days_ago(self._window_days)
        try:
            async with self._session_factory() as db:
                return await self._telemetry.count_by_item(db, kind.value, since)
        except Exception:
            logger.warning(
                "Telemetry read failed for %s; ranking without it", kind.value,
                exc_info=True,
            )
            return {}
