# src/tcg_listing/domain/repository.py
"""Listing-side Protocols — interface contracts for persistence and side channels.

ListingStoreProtocol is transactional: every call runs on the caller's
session, and the caller commits. NotifierProtocol is fire-and-forget and opens
its own session. AuditLogProtocol writes inside the caller's transaction.
"""
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.tcg_common.enums import ListingStatus
from src.tcg_listing.domain.models import Listing


class ListingStoreProtocol(Protocol):
    async def insert(self, db: AsyncSession, listing: Listing) -> None: ...

    async def get_by_id(self, db: AsyncSession, listing_id: str) -> Listing | None: ...

    async def update_if_status(
        self, db: AsyncSession, listing: Listing, expected_status: ListingStatus
    ) -> Listing | None:
        """Persist ``listing`` only if the stored status still equals
        ``expected_status``. Returns the stored row, or None when the
        check failed (row gone or status moved)."""
        ...

    async def delete(self, db: AsyncSession, listing_id: str) -> bool: ...

    async def list_by_seller(self, db: AsyncSession, seller_id: str) -> list[Listing]: ...

    async def list_by_item(
        self, db: AsyncSession, item_id: str, statuses: list[ListingStatus] | None
    ) -> list[Listing]: ...

    async def list_by_status(
        self, db: AsyncSession, status: ListingStatus
    ) -> list[Listing]: ...

    async def lock_seller(self, db: AsyncSession, seller_id: str) -> None:
        """Serialize writers for one seller until the transaction ends."""
        ...


class NotifierProtocol(Protocol):
    async def notify(
        self,
        user_id: str,
        title: str,
        message: str,
        kind: str,
        entity_type: str | None,
        entity_id: str | None,
    ) -> None: ...


class AuditLogProtocol(Protocol):
    async def record(
        self,
        db: AsyncSession,
        actor_id: str,
        action: str,
        entity_type: str,
        entity_id: str,
        metadata: dict[str, Any],
    ) -> None: ...
