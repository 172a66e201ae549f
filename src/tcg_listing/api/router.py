"""tcg_listing seller REST API — all endpoints require a Bearer token.

POST   /listings                       — create
GET    /listings/mine                  — caller's listings
GET    /listings/mine/summary          — effective value vs activation threshold
GET    /listings/items/{item_id}       — active offers for one catalog item
GET    /listings/{listing_id}          — detail
PATCH  /listings/{listing_id}          — edit (re-enters review)
DELETE /listings/{listing_id}          — delete
POST   /listings/{listing_id}/cancel   — withdraw
POST   /listings/{listing_id}/sold     — mark sold
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.tcg_common.database import get_db_session
from src.tcg_common.response import ApiResponse, success_response
from src.tcg_gateway.auth.dependencies import Principal, get_current_principal
from src.tcg_listing.application.schemas import (
    CreateListingRequest,
    ListingListResponse,
    ListingOut,
    UpdateListingRequest,
)
from src.tcg_listing.application.service import get_lifecycle_service

router = APIRouter(prefix="/listings", tags=["listings"])

_service = get_lifecycle_service()


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_listing(
    body: CreateListingRequest,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    listing = await _service.create(
        db,
        seller_id=principal.user_id,
        item_id=body.item_id,
        price_cents=body.price_cents,
        quantity=body.quantity,
        condition=body.condition,
        language=body.language,
        finish=body.finish,
        notes=body.notes,
        account_class=principal.account_class,
    )
    return success_response(ListingOut.from_domain(listing).model_dump(), _request_id(request))


@router.get("/mine")
async def list_my_listings(
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    listings = await _service.list_seller_listings(db, principal.user_id)
    data = ListingListResponse(listings=[ListingOut.from_domain(lst) for lst in listings])
    return success_response(data.model_dump(), _request_id(request))


@router.get("/mine/summary")
async def my_summary(
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    summary = await _service.seller_summary(
        db, principal.user_id, account_class=principal.account_class
    )
    return success_response(summary.model_dump(), _request_id(request))


@router.get("/items/{item_id}")
async def list_item_offers(
    item_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    offers = await _service.list_item_offers(db, item_id)
    data = ListingListResponse(listings=[ListingOut.from_domain(lst) for lst in offers])
    return success_response(data.model_dump(), _request_id(request))


@router.get("/{listing_id}")
async def get_listing(
    listing_id: str,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    listing = await _service.get_listing(db, listing_id)
    return success_response(ListingOut.from_domain(listing).model_dump(), _request_id(request))


@router.patch("/{listing_id}")
async def edit_listing(
    listing_id: str,
    body: UpdateListingRequest,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    listing = await _service.edit(
        db,
        listing_id,
        principal.user_id,
        body.model_dump(exclude_unset=True),
        account_class=principal.account_class,
    )
    return success_response(ListingOut.from_domain(listing).model_dump(), _request_id(request))


@router.delete("/{listing_id}")
async def delete_listing(
    listing_id: str,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.delete(db, listing_id, principal.user_id)
    return success_response({"listing_id": listing_id, "deleted": True}, _request_id(request))


@router.post("/{listing_id}/cancel")
async def cancel_listing(
    listing_id: str,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    listing = await _service.cancel(db, listing_id, principal.user_id)
    return success_response(ListingOut.from_domain(listing).model_dump(), _request_id(request))


@router.post("/{listing_id}/sold")
async def mark_listing_sold(
    listing_id: str,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    listing = await _service.mark_sold(db, listing_id, principal.user_id)
    return success_response(ListingOut.from_domain(listing).model_dump(), _request_id(request))
