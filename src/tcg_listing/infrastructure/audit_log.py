"""AuditLog — append-only record of moderator actions (admin_logs table).

Written inside the moderation transaction: an approval without its audit row
never commits.
"""
import json
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

_INSERT_AUDIT_SQL = text("""
    INSERT INTO admin_logs (admin_id, action, entity_type, entity_id, details)
    VALUES (:admin_id, :action, :entity_type, :entity_id, CAST(:details AS JSONB))
""")


class AuditLog:
    async def record(
        self,
        db: AsyncSession,
        actor_id: str,
        action: str,
        entity_type: str,
        entity_id: str,
        metadata: dict[str, Any],
    ) -> None:
        await db.execute(
            _INSERT_AUDIT_SQL,
            {
                "admin_id": actor_id,
                "action": action,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "details": json.dumps(metadata, default=str),
            },
        )
