"""CatalogReader — concrete implementation of CatalogReaderProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
Collector numbers are compared through fn_normalize_collector_number (migration 001).
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.tcg_catalog.domain.models import CatalogItem, ItemGroup, MarketStat
from src.tcg_catalog.domain.search import SearchIntent, SearchKind

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_ITEM_COLUMNS = """
    ci.id, ci.name, ci.number, ci.rarity, ci.supertype, ci.image_small,
    ci.group_id, g.name AS group_name,
    COALESCE(g.printed_total, g.total) AS printed_total,
    g.release_date AS group_release_date
"""

_SEARCH_ITEMS_WHERE = f"""
    SELECT {_ITEM_COLUMNS}
    FROM catalog_items ci
    LEFT JOIN item_groups g ON g.id = ci.group_id
    WHERE
        (CAST(:number AS TEXT) IS NULL
         OR fn_normalize_collector_number(ci.number) = CAST(:number AS TEXT))
        AND (CAST(:total AS INT) IS NULL
             OR COALESCE(g.printed_total, g.total) = CAST(:total AS INT))
        AND (CAST(:name_pattern AS TEXT) IS NULL
             OR ci.name ILIKE CAST(:name_pattern AS TEXT))
        AND (CAST(:groups_csv AS TEXT) IS NULL
             OR ci.group_id = ANY(string_to_array(CAST(:groups_csv AS TEXT), ',')))
        AND (CAST(:rarities_csv AS TEXT) IS NULL
             OR ci.rarity = ANY(string_to_array(CAST(:rarities_csv AS TEXT), ',')))
        AND (CAST(:supertypes_csv AS TEXT) IS NULL
             OR ci.supertype = ANY(string_to_array(CAST(:supertypes_csv AS TEXT), ',')))
"""

_SEARCH_ITEMS_SQL = text(_SEARCH_ITEMS_WHERE + """
    ORDER BY ci.name, ci.id
    LIMIT :limit
""")

# Numeric lookups: newest group first, ordered before the LIMIT cuts.
_SEARCH_ITEMS_NEWEST_SQL = text(_SEARCH_ITEMS_WHERE + """
    ORDER BY g.release_date DESC NULLS LAST, ci.name, ci.id
    LIMIT :limit
""")

_ITEMS_BY_IDS_SQL = text(f"""
    SELECT {_ITEM_COLUMNS}
    FROM catalog_items ci
    LEFT JOIN item_groups g ON g.id = ci.group_id
    WHERE ci.id = ANY(string_to_array(CAST(:ids_csv AS TEXT), ','))
""")

_SEARCH_GROUPS_SQL = text("""
    SELECT id, name, total, release_date, logo
    FROM item_groups
    WHERE name ILIKE :name_pattern
    ORDER BY release_date DESC NULLS LAST, name
    LIMIT :limit
""")

_MARKET_STATS_SQL = text("""
    SELECT item_id, offers_count, min_price_cents, avg_price_cents
    FROM item_market_stats
    WHERE CAST(:ids_csv AS TEXT) IS NULL
       OR item_id = ANY(string_to_array(CAST(:ids_csv AS TEXT), ','))
""")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _csv(values: list[str] | None) -> str | None:
    return ",".join(values) if values else None


def like_pattern(raw: str) -> str:
    """Substring ILIKE pattern with LIKE metacharacters escaped."""
    escaped = raw.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _row_to_item(row: Any) -> CatalogItem:
    return CatalogItem(
        id=row.id,
        name=row.name,
        number=row.number,
        rarity=row.rarity,
        supertype=row.supertype,
        image_small=row.image_small,
        group_id=row.group_id,
        group_name=row.group_name,
        printed_total=row.printed_total,
        group_release_date=row.group_release_date,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class CatalogReader:
    """Concrete reader — all operations are read-only SQL queries."""

    async def search_items(
        self,
        db: AsyncSession,
        intent: SearchIntent,
        group_ids: list[str] | None,
        rarities: list[str] | None,
        supertypes: list[str] | None,
        limit: int,
        newest_first: bool = False,
    ) -> list[CatalogItem]:
        name_pattern = (
            like_pattern(intent.text)
            if intent.kind == SearchKind.TEXT and intent.text
            else None
        )
        result = await db.execute(
            _SEARCH_ITEMS_NEWEST_SQL if newest_first else _SEARCH_ITEMS_SQL,
            {
                "number": intent.number if intent.is_numeric else None,
                "total": intent.total if intent.kind == SearchKind.EXACT_NUMBER else None,
                "name_pattern": name_pattern,
                "groups_csv": _csv(group_ids),
                "rarities_csv": _csv(rarities),
                "supertypes_csv": _csv(supertypes),
                "limit": limit,
            },
        )
        return [_row_to_item(row) for row in result.fetchall()]

    async def get_items_by_ids(
        self, db: AsyncSession, item_ids: list[str]
    ) -> list[CatalogItem]:
        if not item_ids:
            return []
        result = await db.execute(_ITEMS_BY_IDS_SQL, {"ids_csv": _csv(item_ids)})
        return [_row_to_item(row) for row in result.fetchall()]

    async def search_groups(
        self, db: AsyncSession, text: str, limit: int
    ) -> list[ItemGroup]:
        result = await db.execute(
            _SEARCH_GROUPS_SQL, {"name_pattern": like_pattern(text), "limit": limit}
        )
        return [
            ItemGroup(
                id=row.id,
                name=row.name,
                total=row.total,
                release_date=row.release_date,
                logo=row.logo,
            )
            for row in result.fetchall()
        ]

    async def get_market_stats(
        self, db: AsyncSession, item_ids: list[str] | None = None
    ) -> dict[str, MarketStat]:
        if item_ids is not None and not item_ids:
            return {}
        result = await db.execute(_MARKET_STATS_SQL, {"ids_csv": _csv(item_ids)})
        return {
            row.item_id: MarketStat(
                item_id=row.item_id,
                offers_count=int(row.offers_count),
                min_price_cents=row.min_price_cents,
                avg_price_cents=(
                    int(row.avg_price_cents) if row.avg_price_cents is not None else None
                ),
            )
            for row in result.fetchall()
        }
