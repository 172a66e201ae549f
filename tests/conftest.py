"""Shared test fixtures: ASGI client and bearer headers."""

from collections.abc import Callable

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.tcg_gateway.auth.jwt_handler import create_access_token


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client bound to the FastAPI app (no lifespan, no network)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Callable[..., dict[str, str]]:
    def _headers(
        user_id: str = "seller-1", role: str = "user", account_class: str = "individual"
    ) -> dict[str, str]:
        token = create_access_token(user_id, role=role, account_class=account_class)
        return {"Authorization": f"Bearer {token}"}

    return _headers
