"""Listing domain model — pure dataclass, no SQLAlchemy dependency."""
from dataclasses import dataclass
from datetime import datetime

from src.tcg_common.enums import ListingEvent, ListingStatus


@dataclass
class Listing:
    id: str
    seller_id: str
    item_id: str
    price_cents: int
    fee_cents: int  # fee_cents + net_cents == price_cents
    net_cents: int
    quantity: int
    condition: str  # NM / LP / MP / HP / DMG
    language: str  # pt / en / jp
    finish: str  # normal / foil / reverse
    notes: str | None = None
    status: ListingStatus = ListingStatus.PENDING_MINIMUM
    rejection_reason: str | None = None
    # Set by moderation; reconciliation re-activates approved listings directly.
    is_approved: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class StatusChange:
    """One reconciliation step for a single listing."""

    listing_id: str
    from_status: ListingStatus
    to_status: ListingStatus
    event: ListingEvent
