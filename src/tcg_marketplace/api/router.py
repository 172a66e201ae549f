"""tcg_marketplace REST endpoints — public, no auth.

GET /marketplace   — ranked catalog page (tabs, facets, price band, paging)
"""

from typing import Annotated

from fastapi import APIRouter, Query, Request

from src.tcg_common.cents import major_to_cents
from src.tcg_common.enums import MarketTab
from src.tcg_common.response import ApiResponse, success_response
from src.tcg_marketplace.application.schemas import MarketPageResponse
from src.tcg_marketplace.application.service import MarketplaceService
from src.tcg_marketplace.domain.models import MarketQuery

router = APIRouter(prefix="/marketplace", tags=["marketplace"])

_service = MarketplaceService()

MAX_PRICE_MAJOR = 10_000_000


@router.get("")
async def browse_marketplace(
    request: Request,
    search: Annotated[str, Query(max_length=100)] = "",
    tab: MarketTab = MarketTab.POPULAR,
    groups: Annotated[list[str] | None, Query()] = None,
    rarities: Annotated[list[str] | None, Query()] = None,
    supertypes: Annotated[list[str] | None, Query()] = None,
    price_min: Annotated[
        float | None, Query(ge=0, le=MAX_PRICE_MAJOR, allow_inf_nan=False)
    ] = None,
    price_max: Annotated[
        float | None, Query(ge=0, le=MAX_PRICE_MAJOR, allow_inf_nan=False)
    ] = None,
    only_with_listings: bool = False,
    page: Annotated[int, Query(ge=0)] = 0,
    page_size: Annotated[int, Query(ge=1, le=100)] = 24,
) -> ApiResponse:
    query = MarketQuery(
        search=search,
        tab=tab,
        groups=tuple(groups or ()),
        rarities=tuple(rarities or ()),
        supertypes=tuple(supertypes or ()),
        price_min_cents=major_to_cents(price_min) if price_min is not None else None,
        price_max_cents=major_to_cents(price_max) if price_max is not None else None,
        only_with_listings=only_with_listings,
        page=page,
        page_size=page_size,
    )
    result = await _service.browse(query)
    return success_response(
        MarketPageResponse.from_domain(result).model_dump(),
        getattr(request.state, "request_id", None),
    )
