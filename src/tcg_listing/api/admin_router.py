"""Moderation REST API — admin role required.

GET  /admin/listings/queue                    — pending review, grouped by seller
POST /admin/listings/{listing_id}/approve
POST /admin/listings/{listing_id}/reject
POST /admin/listings/sellers/{seller_id}/reconcile
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.tcg_common.database import get_db_session
from src.tcg_common.response import ApiResponse, success_response
from src.tcg_gateway.auth.dependencies import Principal, require_admin
from src.tcg_listing.application.schemas import ListingOut, RejectListingRequest
from src.tcg_listing.application.service import get_lifecycle_service

router = APIRouter(prefix="/admin/listings", tags=["admin"])

_service = get_lifecycle_service()


@router.get("/queue")
async def review_queue(
    request: Request,
    admin: Annotated[Principal, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    queue = await _service.review_queue(db)
    return success_response(queue.model_dump(), getattr(request.state, "request_id", None))


@router.post("/{listing_id}/approve")
async def approve_listing(
    listing_id: str,
    request: Request,
    admin: Annotated[Principal, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    listing = await _service.admin_approve(db, listing_id, admin.user_id)
    return success_response(
        ListingOut.from_domain(listing).model_dump(), getattr(request.state, "request_id", None)
    )


@router.post("/{listing_id}/reject")
async def reject_listing(
    listing_id: str,
    body: RejectListingRequest,
    request: Request,
    admin: Annotated[Principal, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    listing = await _service.admin_reject(db, listing_id, admin.user_id, body.reason)
    return success_response(
        ListingOut.from_domain(listing).model_dump(), getattr(request.state, "request_id", None)
    )


@router.post("/sellers/{seller_id}/reconcile")
async def reconcile_seller(
    seller_id: str,
    request: Request,
    admin: Annotated[Principal, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    changed = await _service.reconcile_seller(db, seller_id)
    return success_response(
        {"seller_id": seller_id, "changed": changed},
        getattr(request.state, "request_id", None),
    )
