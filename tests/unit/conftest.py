"""In-memory fakes for the listing engine (conform to the domain Protocols)."""

import asyncio
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from itertools import count

import pytest

from src.tcg_catalog.domain.models import CatalogItem
from src.tcg_common.enums import AccountClass, ListingStatus
from src.tcg_listing.domain.models import Listing
from src.tcg_listing.domain.policy import ListingPolicy


class FakeSession:
    """Stands in for AsyncSession: counts commits/rollbacks, nests savepoints."""

    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0
        self.savepoints = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1

    def begin_nested(self) -> "FakeSession._Savepoint":
        self.savepoints += 1
        return FakeSession._Savepoint()

    class _Savepoint:
        async def __aenter__(self) -> None:
            return None

        async def __aexit__(self, *exc: object) -> bool:
            return False


class FakeListingStore:
    """Dict-backed ListingStoreProtocol. Yields to the loop on reads so
    concurrent tasks interleave the way they would against a database."""

    def __init__(self) -> None:
        self.rows: dict[str, Listing] = {}
        self._clock = count()
        self.locked: list[str] = []

    def _stamp(self) -> datetime:
        return datetime(2026, 1, 1, tzinfo=UTC) + timedelta(seconds=next(self._clock))

    async def insert(self, db, listing: Listing) -> None:
        listing.created_at = listing.updated_at = self._stamp()
        self.rows[listing.id] = replace(listing)

    async def get_by_id(self, db, listing_id: str) -> Listing | None:
        await asyncio.sleep(0)
        row = self.rows.get(listing_id)
        return replace(row) if row else None

    async def update_if_status(self, db, listing: Listing, expected_status):
        row = self.rows.get(listing.id)
        if row is None or row.status != expected_status:
            return None
        stored = replace(listing, updated_at=self._stamp())
        self.rows[listing.id] = stored
        return replace(stored)

    async def delete(self, db, listing_id: str) -> bool:
        return self.rows.pop(listing_id, None) is not None

    async def list_by_seller(self, db, seller_id: str) -> list[Listing]:
        await asyncio.sleep(0)
        return [replace(r) for r in self.rows.values() if r.seller_id == seller_id]

    async def list_by_item(self, db, item_id: str, statuses) -> list[Listing]:
        return [
            replace(r) for r in self.rows.values()
            if r.item_id == item_id and (not statuses or r.status in statuses)
        ]

    async def list_by_status(self, db, status) -> list[Listing]:
        return [replace(r) for r in self.rows.values() if r.status == status]

    async def lock_seller(self, db, seller_id: str) -> None:
        self.locked.append(seller_id)

    def status_of(self, listing_id: str) -> ListingStatus:
        return self.rows[listing_id].status


class FakeCatalog:
    def __init__(self, items: list[CatalogItem] | None = None) -> None:
        self.items = {i.id: i for i in (items or [])}

    async def get_items_by_ids(self, db, item_ids: list[str]) -> list[CatalogItem]:
        return [self.items[i] for i in item_ids if i in self.items]


class RecordingNotifier:
    def __init__(self, fail: bool = False) -> None:
        self.sent: list[dict] = []
        self.fail = fail

    async def notify(self, user_id, title, message, kind, entity_type, entity_id) -> None:
        if self.fail:
            raise RuntimeError("notification backend down")
        self.sent.append(
            {"user_id": user_id, "title": title, "message": message, "kind": kind,
             "entity_id": entity_id}
        )


class RecordingAudit:
    def __init__(self) -> None:
        self.entries: list[dict] = []

    async def record(self, db, actor_id, action, entity_type, entity_id, metadata) -> None:
        self.entries.append(
            {"actor_id": actor_id, "action": action, "entity_id": entity_id, **metadata}
        )


def make_item(item_id: str = "sv1-71", name: str = "Pikachu", **kwargs) -> CatalogItem:
    defaults = dict(
        id=item_id, name=name, number="71", rarity="Common", supertype="Pokémon",
        image_small=None, group_id="sv1", group_name="Scarlet & Violet",
        printed_total=198, group_release_date=None,
    )
    defaults.update(kwargs)
    return CatalogItem(**defaults)


@pytest.fixture
def db() -> FakeSession:
    return FakeSession()


@pytest.fixture
def store() -> FakeListingStore:
    return FakeListingStore()


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog([make_item(), make_item("sv1-25", "Charmander", number="25")])


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def audit() -> RecordingAudit:
    return RecordingAudit()


@pytest.fixture
def policy() -> ListingPolicy:
    return ListingPolicy(
        min_activation_cents=700,
        fee_bps={AccountClass.INDIVIDUAL: 500, AccountClass.BUSINESS: 200},
        reconcile_max_attempts=3,
    )
