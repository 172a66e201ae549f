"""HTTP-level tests: routing, auth, envelopes and error mapping.

Services are swapped for fake-backed instances; no database or Redis needed
(the rate limiter gets a mocked pool).
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.main import app
from src.tcg_common.database import get_db_session
from src.tcg_common.enums import MarketTab
from src.tcg_listing.application.service import ListingLifecycleService
from src.tcg_marketplace.domain.models import MarketPage


@pytest.fixture(autouse=True)
def redis_pool(monkeypatch) -> MagicMock:
    """Rate limiter sees a Redis that never reaches the limit."""
    pool = MagicMock()
    pool.incr = AsyncMock(return_value=1)
    pool.expire = AsyncMock(return_value=True)
    monkeypatch.setattr("src.tcg_common.redis_client._redis_pool", pool)
    return pool


@pytest.fixture
def svc(store, catalog, notifier, audit, policy, db, monkeypatch) -> ListingLifecycleService:
    service = ListingLifecycleService(
        store=store, catalog=catalog, notifier=notifier, audit=audit, policy=policy
    )
    monkeypatch.setattr("src.tcg_listing.api.router._service", service)
    monkeypatch.setattr("src.tcg_listing.api.admin_router._service", service)

    async def _db():
        yield db

    app.dependency_overrides[get_db_session] = _db
    return service


class TestHealth:
    async def test_health(self, client) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    async def test_request_id_is_echoed(self, client) -> None:
        resp = await client.get("/health", headers={"X-Request-ID": "edge-12345678"})
        assert resp.headers["x-request-id"] == "edge-12345678"

    async def test_garbage_request_id_is_replaced(self, client) -> None:
        resp = await client.get("/health", headers={"X-Request-ID": "bad id!"})
        assert resp.headers["x-request-id"].startswith("req_")


class TestListingRoutes:
    async def test_requires_token(self, client, svc) -> None:
        resp = await client.post("/api/v1/listings", json={"item_id": "sv1-71", "price_cents": 500})
        assert resp.status_code == 401

    async def test_create_then_summary(self, client, svc, auth_headers) -> None:
        resp = await client.post(
            "/api/v1/listings",
            json={"item_id": "sv1-71", "price_cents": 500},
            headers=auth_headers(),
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["code"] == 0
        assert body["data"]["status"] == "pending_minimum"
        assert body["data"]["price_display"].endswith("5.00")

        summary = await client.get("/api/v1/listings/mine/summary", headers=auth_headers())
        assert summary.json()["data"]["missing_cents"] == 700

    async def test_invalid_price_maps_to_error_envelope(self, client, svc, auth_headers) -> None:
        resp = await client.post(
            "/api/v1/listings",
            json={"item_id": "sv1-71", "price_cents": 0},
            headers=auth_headers(),
        )
        assert resp.status_code == 422
        assert resp.json()["code"] == 4001
        assert resp.json()["data"] is None

    async def test_edit_other_sellers_listing(self, client, svc, auth_headers) -> None:
        created = await client.post(
            "/api/v1/listings",
            json={"item_id": "sv1-71", "price_cents": 800},
            headers=auth_headers("seller-1"),
        )
        listing_id = created.json()["data"]["id"]
        resp = await client.patch(
            f"/api/v1/listings/{listing_id}",
            json={"price_cents": 900},
            headers=auth_headers("seller-2"),
        )
        assert resp.status_code == 403
        assert resp.json()["code"] == 4005

    async def test_missing_listing(self, client, svc, auth_headers) -> None:
        resp = await client.get("/api/v1/listings/nope", headers=auth_headers())
        assert resp.status_code == 404
        assert resp.json()["code"] == 4004


class TestAdminRoutes:
    async def test_non_admin_forbidden(self, client, svc, auth_headers) -> None:
        resp = await client.get("/api/v1/admin/listings/queue", headers=auth_headers())
        assert resp.status_code == 403
        assert resp.json()["code"] == 1002

    async def test_approve_flow(self, client, svc, auth_headers) -> None:
        created = await client.post(
            "/api/v1/listings",
            json={"item_id": "sv1-71", "price_cents": 900},
            headers=auth_headers(),
        )
        listing_id = created.json()["data"]["id"]
        admin = auth_headers("admin-1", role="admin")

        queue = await client.get("/api/v1/admin/listings/queue", headers=admin)
        assert queue.json()["data"]["sellers"][0]["seller_id"] == "seller-1"

        resp = await client.post(f"/api/v1/admin/listings/{listing_id}/approve", headers=admin)
        assert resp.status_code == 200
        assert resp.json()["data"]["status"] == "active"

        again = await client.post(f"/api/v1/admin/listings/{listing_id}/approve", headers=admin)
        assert again.status_code == 409
        assert again.json()["code"] == 4006

        offers = await client.get("/api/v1/listings/items/sv1-71")
        assert [o["id"] for o in offers.json()["data"]["listings"]] == [listing_id]

    async def test_reject_without_reason(self, client, svc, auth_headers) -> None:
        created = await client.post(
            "/api/v1/listings",
            json={"item_id": "sv1-71", "price_cents": 900},
            headers=auth_headers(),
        )
        listing_id = created.json()["data"]["id"]
        resp = await client.post(
            f"/api/v1/admin/listings/{listing_id}/reject",
            json={"reason": ""},
            headers=auth_headers("admin-1", role="admin"),
        )
        assert resp.status_code == 422
        assert resp.json()["code"] == 4007


class TestMarketplaceRoute:
    async def test_query_params_become_market_query(self, client, monkeypatch) -> None:
        fake = MagicMock()
        fake.browse = AsyncMock(return_value=MarketPage(items=[], total=0, total_pages=0))
        monkeypatch.setattr("src.tcg_marketplace.api.router._service", fake)

        resp = await client.get(
            "/api/v1/marketplace",
            params={
                "search": "71/182", "tab": "lowest_price", "price_min": 7,
                "price_max": 12.5, "rarities": ["Rare", "Common"], "page": 1,
            },
        )
        assert resp.status_code == 200
        query = fake.browse.call_args.args[0]
        assert query.tab == MarketTab.LOWEST_PRICE
        assert query.price_min_cents == 700
        assert query.price_max_cents == 1250
        assert query.rarities == ("Rare", "Common")
        assert query.page == 1

    async def test_rejects_bad_tab(self, client) -> None:
        resp = await client.get("/api/v1/marketplace", params={"tab": "newest"})
        assert resp.status_code == 422

    @pytest.mark.parametrize(
        "params",
        [
            {"price_min": "inf"},
            {"price_max": "Infinity"},
            {"price_min": "nan"},
            {"price_max": "1e308"},
        ],
    )
    async def test_rejects_unbounded_price(self, client, monkeypatch, params) -> None:
        fake = MagicMock()
        fake.browse = AsyncMock(return_value=MarketPage(items=[], total=0, total_pages=0))
        monkeypatch.setattr("src.tcg_marketplace.api.router._service", fake)

        resp = await client.get("/api/v1/marketplace", params=params)
        assert resp.status_code == 422
        fake.browse.assert_not_called()
