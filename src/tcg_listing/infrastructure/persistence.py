# src/tcg_listing/infrastructure/persistence.py
"""ListingStore — raw SQL persistence implementation.

Transaction ownership: the CALLER (application service) commits. Status
writes are conditional (WHERE status = :expected_status ... RETURNING); an
empty result means another writer got there first.
"""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.tcg_common.enums import ListingStatus
from src.tcg_listing.domain.models import Listing

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_SELECT_COLUMNS = """
    id, seller_id, item_id, price_cents, fee_cents, net_cents, quantity,
    condition, language, finish, notes, status, rejection_reason, is_approved,
    created_at, updated_at
"""

_INSERT_LISTING_SQL = text(f"""
    INSERT INTO listings (id, seller_id, item_id, price_cents, fee_cents, net_cents,
        quantity, condition, language, finish, notes, status, rejection_reason,
        is_approved)
    VALUES (:id, :seller_id, :item_id, :price_cents, :fee_cents, :net_cents,
        :quantity, :condition, :language, :finish, :notes, :status, :rejection_reason,
        :is_approved)
    RETURNING {_SELECT_COLUMNS}
""")

_CONDITIONAL_UPDATE_SQL = text(f"""
    UPDATE listings
    SET price_cents = :price_cents, fee_cents = :fee_cents, net_cents = :net_cents,
        quantity = :quantity, condition = :condition, language = :language,
        finish = :finish, notes = :notes, status = :status,
        rejection_reason = :rejection_reason, is_approved = :is_approved,
        updated_at = NOW()
    WHERE id = :id AND status = :expected_status
    RETURNING {_SELECT_COLUMNS}
""")

_DELETE_LISTING_SQL = text("DELETE FROM listings WHERE id = :id RETURNING id")

_GET_LISTING_SQL = text(f"SELECT {_SELECT_COLUMNS} FROM listings WHERE id = :id")

_LIST_BY_SELLER_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM listings
    WHERE seller_id = :seller_id
    ORDER BY created_at DESC, id DESC
""")

_LIST_BY_ITEM_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM listings
    WHERE item_id = :item_id
      AND (CAST(:statuses_csv AS TEXT) IS NULL
           OR status = ANY(string_to_array(CAST(:statuses_csv AS TEXT), ',')))
    ORDER BY price_cents ASC, created_at ASC
""")

_LIST_BY_STATUS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM listings
    WHERE status = :status
    ORDER BY created_at ASC
""")

# Transaction-scoped; released on COMMIT / ROLLBACK.
_LOCK_SELLER_SQL = text("SELECT pg_advisory_xact_lock(hashtext(:seller_id))")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_listing(row: Any) -> Listing:
    """Convert a DB result row to a Listing domain object."""
    return Listing(
        id=row.id,
        seller_id=row.seller_id,
        item_id=row.item_id,
        price_cents=row.price_cents,
        fee_cents=row.fee_cents,
        net_cents=row.net_cents,
        quantity=row.quantity,
        condition=row.condition,
        language=row.language,
        finish=row.finish,
        notes=row.notes,
        status=ListingStatus(row.status),
        rejection_reason=row.rejection_reason,
        is_approved=row.is_approved,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _params(listing: Listing) -> dict[str, Any]:
    return {
        "id": listing.id,
        "price_cents": listing.price_cents,
        "fee_cents": listing.fee_cents,
        "net_cents": listing.net_cents,
        "quantity": listing.quantity,
        "condition": listing.condition,
        "language": listing.language,
        "finish": listing.finish,
        "notes": listing.notes,
        "status": ListingStatus(listing.status).value,
        "rejection_reason": listing.rejection_reason,
        "is_approved": listing.is_approved,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ListingStore:
    """Concrete implementation of ListingStoreProtocol using raw SQL."""

    async def insert(self, db: AsyncSession, listing: Listing) -> None:
        params = _params(listing)
        params.update(seller_id=listing.seller_id, item_id=listing.item_id)
        row = (await db.execute(_INSERT_LISTING_SQL, params)).fetchone()
        listing.created_at = row.created_at
        listing.updated_at = row.updated_at

    async def get_by_id(self, db: AsyncSession, listing_id: str) -> Listing | None:
        result = await db.execute(_GET_LISTING_SQL, {"id": listing_id})
        row = result.fetchone()
        return _row_to_listing(row) if row else None

    async def update_if_status(
        self, db: AsyncSession, listing: Listing, expected_status: ListingStatus
    ) -> Listing | None:
        params = _params(listing)
        params["expected_status"] = ListingStatus(expected_status).value
        row = (await db.execute(_CONDITIONAL_UPDATE_SQL, params)).fetchone()
        return _row_to_listing(row) if row else None

    async def delete(self, db: AsyncSession, listing_id: str) -> bool:
        row = (await db.execute(_DELETE_LISTING_SQL, {"id": listing_id})).fetchone()
        return row is not None

    async def list_by_seller(self, db: AsyncSession, seller_id: str) -> list[Listing]:
        result = await db.execute(_LIST_BY_SELLER_SQL, {"seller_id": seller_id})
        return [_row_to_listing(row) for row in result.fetchall()]

    async def list_by_item(
        self, db: AsyncSession, item_id: str, statuses: list[ListingStatus] | None
    ) -> list[Listing]:
        statuses_csv = ",".join(ListingStatus(s).value for s in statuses) if statuses else None
        result = await db.execute(
            _LIST_BY_ITEM_SQL, {"item_id": item_id, "statuses_csv": statuses_csv}
        )
        return [_row_to_listing(row) for row in result.fetchall()]

    async def list_by_status(
        self, db: AsyncSession, status: ListingStatus
    ) -> list[Listing]:
        result = await db.execute(
            _LIST_BY_STATUS_SQL, {"status": ListingStatus(status).value}
        )
        return [_row_to_listing(row) for row in result.fetchall()]

    async def lock_seller(self, db: AsyncSession, seller_id: str) -> None:
        await db.execute(_LOCK_SELLER_SQL, {"seller_id": seller_id})
