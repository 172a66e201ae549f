"""tcg_catalog REST endpoints.

GET /catalog/suggest?q=...   — typeahead over items and groups
"""

from typing import Annotated

from fastapi import APIRouter, Query, Request

from src.tcg_catalog.application.service import CatalogSuggestService
from src.tcg_common.response import ApiResponse, success_response

router = APIRouter(prefix="/catalog", tags=["catalog"])

_service = CatalogSuggestService()


@router.get("/suggest")
async def suggest(
    request: Request,
    q: Annotated[str, Query(max_length=100)] = "",
) -> ApiResponse:
    result = await _service.suggest(q)
    return success_response(
        result.model_dump(), getattr(request.state, "request_id", None)
    )
