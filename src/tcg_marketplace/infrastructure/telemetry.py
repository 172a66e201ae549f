"""TelemetryReader — counts analytics events per item over a time window."""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

_COUNT_BY_ITEM_SQL = text("""
    SELECT entity_id, COUNT(*) AS event_count
    FROM analytics_events
    WHERE event_name = :event_name
      AND created_at >= :since
      AND entity_id IS NOT NULL
    GROUP BY entity_id
""")


class TelemetryReader:
    async def count_by_item(
        self, db: AsyncSession, event_name: str, since: datetime
    ) -> dict[str, int]:
        result = await db.execute(
            _COUNT_BY_ITEM_SQL, {"event_name": event_name, "since": since}
        )
        return {row.entity_id: int(row.event_count) for row in result.fetchall()}
