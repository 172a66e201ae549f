"""ThresholdReconciler — applies the reconciliation plan for one seller.

The plan is computed from one snapshot (domain.reconciler) and written with
conditional updates inside a SAVEPOINT. If any write finds the row moved on,
the savepoint rolls back and the pass restarts from a fresh snapshot; a
half-applied pass is never kept. Exhausting the attempts raises
ConflictError, which rolls back the caller's whole transaction.

Writers for the same seller are serialized by SellerLocks (in-process) and
ListingStore.lock_seller (across processes).
"""
import asyncio
import logging
from collections.abc import AsyncIterator, Collection
from contextlib import asynccontextmanager
from dataclasses import replace

from sqlalchemy.ext.asyncio import AsyncSession

from src.tcg_common.datetime_utils import utc_now
from src.tcg_common.errors import ConflictError
from src.tcg_listing.domain.models import StatusChange
from src.tcg_listing.domain.policy import ListingPolicy
from src.tcg_listing.domain.reconciler import plan_reconciliation
from src.tcg_listing.domain.repository import ListingStoreProtocol

logger = logging.getLogger(__name__)


class SellerLocks:
    """One asyncio.Lock per seller; different sellers never contend.

    A seller's lock lives only while some task holds or waits on it.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def for_seller(self, seller_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(seller_id, asyncio.Lock())
        self._users[seller_id] = self._users.get(seller_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[seller_id] -= 1
            if not self._users[seller_id]:
                del self._users[seller_id]
                del self._locks[seller_id]


class _StaleSnapshot(Exception):
    def __init__(self, listing_id: str) -> None:
        self.listing_id = listing_id
        super().__init__(listing_id)


class ThresholdReconciler:
    def __init__(
        self, store: ListingStoreProtocol, policy: ListingPolicy | None = None
    ) -> None:
        self._store = store
        self._policy = policy or ListingPolicy()

    async def reconcile(
        self,
        db: AsyncSession,
        seller_id: str,
        exempt: Collection[str] = (),
    ) -> list[StatusChange]:
        """Bring every listing of ``seller_id`` in line with the threshold.

        Returns the applied changes (empty when already converged).
        """
        attempts = max(1, self._policy.reconcile_max_attempts)
        for attempt in range(1, attempts + 1):
            listings = await self._store.list_by_seller(db, seller_id)
            plan = plan_reconciliation(
                listings, self._policy.min_activation_cents, exempt
            )
            if not plan:
                return []

            by_id = {lst.id: lst for lst in listings}
            now = utc_now()
            try:
                async with db.begin_nested():
                    for change in plan:
                        moved = replace(
                            by_id[change.listing_id], status=change.to_status, updated_at=now
                        )
                        stored = await self._store.update_if_status(
                            db, moved, change.from_status
                        )
                        if stored is None:
                            raise _StaleSnapshot(change.listing_id)
            except _StaleSnapshot as exc:
                logger.warning(
                    "reconcile seller=%s: listing %s moved during pass (attempt %d/%d)",
                    seller_id,
                    exc.listing_id,
                    attempt,
                    attempts,
                )
                continue

            logger.info(
                "reconcile seller=%s: %s",
                seller_id,
                ", ".join(f"{c.listing_id} {c.from_status.value}->{c.to_status.value}"
                          for c in plan),
            )
            return plan

        raise ConflictError(f"reconciliation for seller {seller_id} did not converge")
