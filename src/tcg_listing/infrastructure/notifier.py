"""Notifier — writes in-app notifications for the seller.

Runs after the listing transaction has committed, on its own session, so a
failed insert can never undo a state change.
"""
import logging

from sqlalchemy import text

from src.tcg_common.database import SessionFactory, async_session_factory

logger = logging.getLogger(__name__)

_INSERT_NOTIFICATION_SQL = text("""
    INSERT INTO notifications (user_id, title, message, type, entity_type, entity_id)
    VALUES (:user_id, :title, :message, :type, :entity_type, :entity_id)
""")


class Notifier:
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session_factory: SessionFactory = session_factory or async_session_factory

    async def notify(
        self,
        user_id: str,
        title: str,
        message: str,
        kind: str,
        entity_type: str | None,
        entity_id: str | None,
    ) -> None:
        async with self._session_factory() as db:
            await db.execute(
                _INSERT_NOTIFICATION_SQL,
                {
                    "user_id": user_id,
                    "title": title,
                    "message": message,
                    "type": kind,
                    "entity_type": entity_type,
                    "entity_id": entity_id,
                },
            )
            await db.commit()
        logger.debug("notification %s queued for %s", kind, user_id)
