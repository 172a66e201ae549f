"""Pydantic schemas for tcg_listing API requests and responses.

Request bodies keep price/quantity/attribute fields loosely typed so the
lifecycle service reports its own error codes (4001-4003) instead of the
framework's generic 422.
"""

from pydantic import BaseModel, Field

from src.tcg_common.cents import cents_to_display
from src.tcg_common.datetime_utils import isoformat_or_none
from src.tcg_listing.domain.models import Listing

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateListingRequest(BaseModel):
    item_id: str = Field(..., min_length=1, max_length=64)
    price_cents: int
    quantity: int = 1
    condition: str = "NM"
    language: str = "pt"
    finish: str = "normal"
    notes: str | None = Field(None, max_length=1000)


class UpdateListingRequest(BaseModel):
    """Only the fields present in the body are changed."""

    price_cents: int | None = None
    quantity: int | None = None
    condition: str | None = None
    language: str | None = None
    finish: str | None = None
    notes: str | None = Field(None, max_length=1000)


class RejectListingRequest(BaseModel):
    reason: str = Field("", max_length=500)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class ListingOut(BaseModel):
    id: str
    seller_id: str
    item_id: str
    price_cents: int
    price_display: str
    fee_cents: int
    net_cents: int
    quantity: int
    condition: str
    language: str
    finish: str
    notes: str | None
    status: str
    rejection_reason: str | None
    is_approved: bool
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_domain(cls, lst: Listing) -> "ListingOut":
        return cls(
            id=lst.id,
            seller_id=lst.seller_id,
            item_id=lst.item_id,
            price_cents=lst.price_cents,
            price_display=cents_to_display(lst.price_cents),
            fee_cents=lst.fee_cents,
            net_cents=lst.net_cents,
            quantity=lst.quantity,
            condition=lst.condition,
            language=lst.language,
            finish=lst.finish,
            notes=lst.notes,
            status=str(getattr(lst.status, "value", lst.status)),
            rejection_reason=lst.rejection_reason,
            is_approved=lst.is_approved,
            created_at=isoformat_or_none(lst.created_at),
            updated_at=isoformat_or_none(lst.updated_at),
        )


class ListingListResponse(BaseModel):
    listings: list[ListingOut]


class SellerSummary(BaseModel):
    seller_id: str
    effective_value_cents: int
    in_play_value_cents: int
    threshold_cents: int
    missing_cents: int
    meets_minimum: bool
    converged: bool  # False until the next reconciliation or moderation pass
    fee_rate: str
    counts: dict[str, int]


class ReviewQueueEntry(BaseModel):
    seller_id: str
    pending_count: int
    pending_value_cents: int
    effective_value_cents: int
    oldest_pending_at: str | None


class ReviewQueueResponse(BaseModel):
    sellers: list[ReviewQueueEntry]
