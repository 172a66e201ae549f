"""Fixed-window rate limiting for marketplace query endpoints.

Rule: RATE_LIMIT_QUERY_PER_MIN requests per minute per client on GET routes
under the configured prefixes. Redis INCR + EXPIRE counts the window;
key pattern "ratelimit:{client}:{minute}".

The client is the socket peer. When the peer is one of
RATE_LIMIT_TRUSTED_PROXIES, X-Forwarded-For is walked right to left and the
first hop that is not a trusted proxy is used instead. A Redis outage lets
requests through.
"""

import logging
import time
from collections.abc import Awaitable, Callable, Collection

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from config.settings import settings
from src.tcg_common.errors import RateLimitError
from src.tcg_common.redis_client import get_redis
from src.tcg_common.response import error_response

logger = logging.getLogger(__name__)

_WINDOW_SECONDS = 60


def client_key(request: Request, trusted_proxies: Collection[str] = ()) -> str:
    peer = request.client.host if request.client else "unknown"
    if peer not in trusted_proxies:
        return peer
    forwarded = request.headers.get("x-forwarded-for", "")
    for hop in reversed([h.strip() for h in forwarded.split(",") if h.strip()]):
        if hop not in trusted_proxies:
            return hop
    return peer


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        prefixes: tuple[str, ...] = ("/api/v1/marketplace", "/api/v1/catalog"),
        limit: int | None = None,
        redis_getter: Callable[[], Awaitable[aioredis.Redis]] = get_redis,
        trusted_proxies: Collection[str] | None = None,
    ) -> None:
        super().__init__(app)
        self._prefixes = prefixes
        self._limit = limit or settings.RATE_LIMIT_QUERY_PER_MIN
        self._redis_getter = redis_getter
        self._trusted_proxies = frozenset(
            settings.RATE_LIMIT_TRUSTED_PROXIES if trusted_proxies is None else trusted_proxies
        )

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method != "GET" or not request.url.path.startswith(self._prefixes):
            return await call_next(request)

        window = int(time.time()) // _WINDOW_SECONDS
        key = f"ratelimit:{client_key(request, self._trusted_proxies)}:{window}"
        try:
            redis = await self._redis_getter()
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, _WINDOW_SECONDS)
        except RedisError:
            logger.warning("rate limiter unavailable, allowing %s", request.url.path)
            return await call_next(request)

        if count > self._limit:
            err = RateLimitError()
            resp = error_response(
                err.code, err.message, getattr(request.state, "request_id", None)
            )
            return JSONResponse(
                status_code=err.http_status,
                content=resp.model_dump(),
                headers={"Retry-After": str(_WINDOW_SECONDS)},
            )
        return await call_next(request)
