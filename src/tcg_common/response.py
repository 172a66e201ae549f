"""ApiResponse envelope shared by every endpoint (success and AppError alike).

    {"code": 0, "message": "success", "data": {...},
     "timestamp": "2026-10-12T08:00:00+00:00", "request_id": "req_..."}

``code`` is 0 on success, otherwise the AppError code (see errors.py) and
``data`` is null. ``request_id`` echoes the id RequestLogMiddleware put on
request.state so a client report can be matched to the access log.
"""

import uuid
from typing import Any

from pydantic import BaseModel, Field

from src.tcg_common.datetime_utils import utc_now


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    request_id: str = Field(default_factory=new_request_id)


def success_response(data: Any = None, request_id: str | None = None) -> ApiResponse:
    return ApiResponse(data=data, request_id=request_id or new_request_id())


def error_response(code: int, message: str, request_id: str | None = None) -> ApiResponse:
    return ApiResponse(
        code=code, message=message, data=None, request_id=request_id or new_request_id()
    )
