# src/tcg_listing/application/service.py
"""ListingLifecycleService — every write to a listing goes through here.

Each write runs as one transaction per seller:
    seller lock -> state change -> ThresholdReconciler pass -> COMMIT
Any failure (including a reconciliation that cannot converge) rolls the whole
unit back. Notifications go out only after COMMIT and never raise.
"""
import logging
from collections import Counter
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.tcg_catalog.domain.repository import CatalogReaderProtocol
from src.tcg_catalog.infrastructure.persistence import CatalogReader
from src.tcg_common.cents import cents_to_display
from src.tcg_common.datetime_utils import isoformat_or_none, utc_now
from src.tcg_common.enums import (
    AccountClass,
    AuditAction,
    CardCondition,
    CardFinish,
    CardLanguage,
    ListingEvent,
    ListingStatus,
    NotificationKind,
)
from src.tcg_common.errors import (
    ConflictError,
    InvalidListingAttributeError,
    InvalidPriceError,
    InvalidQuantityError,
    InvalidReasonError,
    InvalidTransitionError,
    ItemNotFoundError,
    ListingNotFoundError,
    UnauthorizedError,
)
from src.tcg_common.id_generator import generate_id
from src.tcg_listing.application.reconciliation import SellerLocks, ThresholdReconciler
from src.tcg_listing.application.schemas import (
    ReviewQueueEntry,
    ReviewQueueResponse,
    SellerSummary,
)
from src.tcg_listing.domain.fee import calculate_seller_fee, fee_label
from src.tcg_listing.domain.models import Listing
from src.tcg_listing.domain.policy import ListingPolicy
from src.tcg_listing.domain.reconciler import effective_value, in_play_value, is_converged
from src.tcg_listing.domain.repository import (
    AuditLogProtocol,
    ListingStoreProtocol,
    NotifierProtocol,
)
from src.tcg_listing.domain.state_machine import (
    can_apply,
    ensure_transition,
    initial_status,
)
from src.tcg_listing.infrastructure.audit_log import AuditLog
from src.tcg_listing.infrastructure.notifier import Notifier
from src.tcg_listing.infrastructure.persistence import ListingStore

logger = logging.getLogger(__name__)

_ENTITY = "listing"
_EDITABLE_FIELDS = frozenset(
    {"price_cents", "quantity", "condition", "language", "finish", "notes"}
)


# ---------------------------------------------------------------------------
# Input validation (pre-mutation)
# ---------------------------------------------------------------------------


def _validate_price(price_cents: Any) -> int:
    if not isinstance(price_cents, int) or isinstance(price_cents, bool) or price_cents <= 0:
        raise InvalidPriceError(price_cents)
    return price_cents


def _validate_quantity(quantity: Any) -> int:
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
        raise InvalidQuantityError(quantity)
    return quantity


def _validate_choice(field: str, value: Any, choices: type) -> str:
    try:
        return str(choices(value).value)
    except ValueError:
        raise InvalidListingAttributeError(field, value) from None


def _validate_attributes(condition: Any, language: Any, finish: Any) -> tuple[str, str, str]:
    return (
        _validate_choice("condition", condition, CardCondition),
        _validate_choice("language", language, CardLanguage),
        _validate_choice("finish", finish, CardFinish),
    )


class ListingLifecycleService:
    def __init__(
        self,
        store: ListingStoreProtocol | None = None,
        catalog: CatalogReaderProtocol | None = None,
        notifier: NotifierProtocol | None = None,
        audit: AuditLogProtocol | None = None,
        policy: ListingPolicy | None = None,
        locks: SellerLocks | None = None,
    ) -> None:
        self._store: ListingStoreProtocol = store or ListingStore()
        self._catalog: CatalogReaderProtocol = catalog or CatalogReader()
        self._notifier: NotifierProtocol = notifier or Notifier()
        self._audit: AuditLogProtocol = audit or AuditLog()
        self._policy = policy or ListingPolicy()
        self._locks = locks or SellerLocks()
        self._reconciler = ThresholdReconciler(self._store, self._policy)

    @property
    def policy(self) -> ListingPolicy:
        return self._policy

    # ------------------------------------------------------------------
    # Seller writes
    # ------------------------------------------------------------------

    async def create(
        self,
        db: AsyncSession,
        seller_id: str,
        item_id: str,
        price_cents: int,
        quantity: int,
        condition: str,
        language: str,
        finish: str,
        notes: str | None = None,
        account_class: AccountClass | str = AccountClass.INDIVIDUAL,
    ) -> Listing:
        price_cents = _validate_price(price_cents)
        quantity = _validate_quantity(quantity)
        condition, language, finish = _validate_attributes(condition, language, finish)
        fee = calculate_seller_fee(price_cents, account_class, self._policy)
        threshold = self._policy.min_activation_cents

        async with self._seller_transaction(db, seller_id):
            item_name = await self._require_item(db, item_id)
            current = await self._store.list_by_seller(db, seller_id)
            total_after = in_play_value(current) + price_cents
            now = utc_now()
            listing = Listing(
                id=generate_id(),
                seller_id=seller_id,
                item_id=item_id,
                price_cents=price_cents,
                fee_cents=fee.fee_cents,
                net_cents=fee.net_cents,
                quantity=quantity,
                condition=condition,
                language=language,
                finish=finish,
                notes=notes or None,
                status=initial_status(total_after >= threshold),
                created_at=now,
                updated_at=now,
            )
            await self._store.insert(db, listing)
            await self._reconciler.reconcile(db, seller_id)
            stored = await self._reload(db, listing.id)

        logger.info(
            "listing created id=%s seller=%s price=%d status=%s",
            stored.id, seller_id, price_cents, stored.status.value,
        )
        if stored.status == ListingStatus.PENDING_MINIMUM:
            missing = cents_to_display(max(0, threshold - total_after))
            await self._notify_safely(
                seller_id,
                "Listing pending: minimum not reached",
                f"{missing} more in listings is needed to activate. "
                f'Your listing of "{item_name}" will stay pending.',
                NotificationKind.LISTING_PENDING_MINIMUM,
                stored.id,
            )
        else:
            await self._notify_safely(
                seller_id,
                "Listing submitted for review",
                f'Your listing of "{item_name}" will be reviewed by an administrator.',
                NotificationKind.LISTING_SUBMITTED,
                stored.id,
            )
        return stored

    async def edit(
        self,
        db: AsyncSession,
        listing_id: str,
        seller_id: str,
        fields: Mapping[str, Any],
        account_class: AccountClass | str = AccountClass.INDIVIDUAL,
    ) -> Listing:
        """Apply ``fields`` and send the listing back to moderation.

        The edited listing always lands in PENDING_REVIEW; moderation applies
        the threshold to it when approving. The rest of the seller's listings
        are reconciled against the new total.
        """
        unknown = set(fields) - _EDITABLE_FIELDS
        if unknown:
            name = sorted(unknown)[0]
            raise InvalidListingAttributeError(name, fields[name])

        async with self._seller_transaction(db, seller_id):
            listing = await self._load_owned(db, listing_id, seller_id)
            price_cents = _validate_price(fields.get("price_cents", listing.price_cents))
            quantity = _validate_quantity(fields.get("quantity", listing.quantity))
            condition, language, finish = _validate_attributes(
                fields.get("condition", listing.condition),
                fields.get("language", listing.language),
                fields.get("finish", listing.finish),
            )
            fee = calculate_seller_fee(price_cents, account_class, self._policy)
            target = ensure_transition(
                listing.id, listing.status, ListingEvent.EDIT, ListingStatus.PENDING_REVIEW
            )
            revised = replace(
                listing,
                price_cents=price_cents,
                fee_cents=fee.fee_cents,
                net_cents=fee.net_cents,
                quantity=quantity,
                condition=condition,
                language=language,
                finish=finish,
                notes=fields.get("notes", listing.notes) or None,
                status=target,
                rejection_reason=None,
                is_approved=False,
                updated_at=utc_now(),
            )
            stored = await self._store.update_if_status(db, revised, listing.status)
            if stored is None:
                raise ConflictError(f"listing {listing_id} changed during edit")
            await self._reconciler.reconcile(db, seller_id, exempt={listing_id})
            item_name = await self._item_name(db, listing.item_id)

        logger.info(
            "listing edited id=%s seller=%s %s->%s",
            listing_id, seller_id, listing.status.value, stored.status.value,
        )
        await self._notify_safely(
            seller_id,
            "Listing resubmitted",
            f'Your changes to "{item_name}" were sent for review.',
            NotificationKind.LISTING_RESUBMITTED,
            listing_id,
        )
        return stored

    async def delete(self, db: AsyncSession, listing_id: str, seller_id: str) -> None:
        async with self._seller_transaction(db, seller_id):
            await self._load_owned(db, listing_id, seller_id)
            if not await self._store.delete(db, listing_id):
                raise ListingNotFoundError(listing_id)
            await self._reconciler.reconcile(db, seller_id)
        logger.info("listing deleted id=%s seller=%s", listing_id, seller_id)

    async def cancel(self, db: AsyncSession, listing_id: str, seller_id: str) -> Listing:
        """Withdraw a listing without deleting its history."""
        return await self._seller_move(
            db, listing_id, seller_id, ListingEvent.CANCEL, ListingStatus.CANCELLED
        )

    async def mark_sold(self, db: AsyncSession, listing_id: str, seller_id: str) -> Listing:
        return await self._seller_move(
            db, listing_id, seller_id, ListingEvent.SELL, ListingStatus.SOLD
        )

    # ------------------------------------------------------------------
    # Moderation
    # ------------------------------------------------------------------

    async def admin_approve(
        self, db: AsyncSession, listing_id: str, admin_id: str
    ) -> Listing:
        """PENDING_REVIEW -> ACTIVE, or -> PENDING_MINIMUM below the threshold."""
        seller_id = await self._seller_of_reviewable(db, listing_id, ListingEvent.APPROVE)
        threshold = self._policy.min_activation_cents

        async with self._seller_transaction(db, seller_id):
            listing = await self._reload(db, listing_id)
            value = in_play_value(await self._store.list_by_seller(db, seller_id))
            target = ListingStatus.ACTIVE if value >= threshold else ListingStatus.PENDING_MINIMUM
            ensure_transition(listing.id, listing.status, ListingEvent.APPROVE, target)
            approved = replace(
                listing, status=target, is_approved=True, rejection_reason=None,
                updated_at=utc_now(),
            )
            stored = await self._store.update_if_status(
                db, approved, ListingStatus.PENDING_REVIEW
            )
            if stored is None:
                raise InvalidTransitionError(
                    listing_id, ListingStatus.PENDING_REVIEW.value, ListingEvent.APPROVE.value
                )
            await self._audit.record(
                db,
                admin_id,
                AuditAction.APPROVE_LISTING.value,
                _ENTITY,
                listing_id,
                {"seller_id": seller_id, "status": target.value, "in_play_cents": value},
            )
            await self._reconciler.reconcile(db, seller_id)
            stored = await self._reload(db, listing_id)
            item_name = await self._item_name(db, listing.item_id)

        logger.info(
            "listing approved id=%s admin=%s status=%s", listing_id, admin_id, target.value
        )
        if target == ListingStatus.ACTIVE:
            title = "Listing approved!"
            message = f'Your listing of "{item_name}" was approved and is live on the marketplace.'
        else:
            title = "Listing approved (pending minimum)"
            message = (
                f'Your listing of "{item_name}" was approved, but waits for the '
                f"{cents_to_display(threshold)} minimum to appear on the marketplace."
            )
        await self._notify_safely(
            seller_id, title, message, NotificationKind.LISTING_APPROVED, listing_id
        )
        return stored

    async def admin_reject(
        self, db: AsyncSession, listing_id: str, admin_id: str, reason: str
    ) -> Listing:
        reason = (reason or "").strip()
        if not reason:
            raise InvalidReasonError()
        seller_id = await self._seller_of_reviewable(db, listing_id, ListingEvent.REJECT)

        async with self._seller_transaction(db, seller_id):
            listing = await self._reload(db, listing_id)
            target = ensure_transition(
                listing.id, listing.status, ListingEvent.REJECT, ListingStatus.REJECTED
            )
            rejected = replace(
                listing, status=target, rejection_reason=reason, updated_at=utc_now()
            )
            stored = await self._store.update_if_status(
                db, rejected, ListingStatus.PENDING_REVIEW
            )
            if stored is None:
                raise InvalidTransitionError(
                    listing_id, ListingStatus.PENDING_REVIEW.value, ListingEvent.REJECT.value
                )
            await self._audit.record(
                db,
                admin_id,
                AuditAction.REJECT_LISTING.value,
                _ENTITY,
                listing_id,
                {"seller_id": seller_id, "reason": reason},
            )
            await self._reconciler.reconcile(db, seller_id)
            item_name = await self._item_name(db, listing.item_id)

        logger.info("listing rejected id=%s admin=%s", listing_id, admin_id)
        await self._notify_safely(
            seller_id,
            "Listing rejected",
            f'Your listing of "{item_name}" was rejected. Reason: {reason}',
            NotificationKind.LISTING_REJECTED,
            listing_id,
        )
        return stored

    async def reconcile_seller(self, db: AsyncSession, seller_id: str) -> int:
        """Run a standalone reconciliation pass. Returns the number of changes."""
        async with self._seller_transaction(db, seller_id):
            changes = await self._reconciler.reconcile(db, seller_id)
        return len(changes)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_listing(self, db: AsyncSession, listing_id: str) -> Listing:
        return await self._reload(db, listing_id)

    async def list_seller_listings(self, db: AsyncSession, seller_id: str) -> list[Listing]:
        return await self._store.list_by_seller(db, seller_id)

    async def list_item_offers(self, db: AsyncSession, item_id: str) -> list[Listing]:
        """ACTIVE listings of one item, cheapest first."""
        offers = await self._store.list_by_item(db, item_id, [ListingStatus.ACTIVE])
        return sorted(offers, key=lambda lst: (lst.price_cents, lst.id))

    async def seller_summary(
        self,
        db: AsyncSession,
        seller_id: str,
        account_class: AccountClass | str = AccountClass.INDIVIDUAL,
    ) -> SellerSummary:
        listings = await self._store.list_by_seller(db, seller_id)
        threshold = self._policy.min_activation_cents
        value = effective_value(listings)
        counts = Counter(ListingStatus(lst.status).value for lst in listings)
        return SellerSummary(
            seller_id=seller_id,
            effective_value_cents=value,
            in_play_value_cents=in_play_value(listings),
            threshold_cents=threshold,
            missing_cents=max(0, threshold - value),
            meets_minimum=value >= threshold,
            converged=is_converged(listings, threshold),
            fee_rate=fee_label(account_class, self._policy),
            counts={s.value: counts.get(s.value, 0) for s in ListingStatus},
        )

    async def review_queue(self, db: AsyncSession) -> ReviewQueueResponse:
        """PENDING_REVIEW work grouped by seller, oldest submission first."""
        pending = await self._store.list_by_status(db, ListingStatus.PENDING_REVIEW)
        by_seller: dict[str, list[Listing]] = {}
        for lst in pending:
            by_seller.setdefault(lst.seller_id, []).append(lst)

        entries: list[ReviewQueueEntry] = []
        for seller_id, items in by_seller.items():
            seller_listings = await self._store.list_by_seller(db, seller_id)
            stamps = [lst.created_at for lst in items if lst.created_at is not None]
            oldest = min(stamps) if stamps else None
            entries.append(
                ReviewQueueEntry(
                    seller_id=seller_id,
                    pending_count=len(items),
                    pending_value_cents=sum(lst.price_cents for lst in items),
                    effective_value_cents=effective_value(seller_listings),
                    oldest_pending_at=isoformat_or_none(oldest),
                )
            )
        entries.sort(key=lambda e: (e.oldest_pending_at is None, e.oldest_pending_at or ""))
        return ReviewQueueResponse(sellers=entries)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _seller_transaction(
        self, db: AsyncSession, seller_id: str
    ) -> AsyncIterator[None]:
        async with self._locks.for_seller(seller_id):
            try:
                await self._store.lock_seller(db, seller_id)
                yield
                await db.commit()
            except Exception:
                await db.rollback()
                raise

    async def _seller_move(
        self,
        db: AsyncSession,
        listing_id: str,
        seller_id: str,
        event: ListingEvent,
        target: ListingStatus,
    ) -> Listing:
        async with self._seller_transaction(db, seller_id):
            listing = await self._load_owned(db, listing_id, seller_id)
            ensure_transition(listing.id, listing.status, event, target)
            moved = replace(listing, status=target, updated_at=utc_now())
            stored = await self._store.update_if_status(db, moved, listing.status)
            if stored is None:
                raise ConflictError(f"listing {listing_id} changed during {event.value}")
            await self._reconciler.reconcile(db, seller_id)
        logger.info(
            "listing %s id=%s seller=%s", event.value.lower(), listing_id, seller_id
        )
        return stored

    async def _seller_of_reviewable(
        self, db: AsyncSession, listing_id: str, event: ListingEvent
    ) -> str:
        """Fail fast, without mutation, unless the listing awaits review."""
        listing = await self._reload(db, listing_id)
        if not can_apply(listing.status, event):
            raise InvalidTransitionError(listing_id, listing.status.value, event.value)
        return listing.seller_id

    async def _reload(self, db: AsyncSession, listing_id: str) -> Listing:
        listing = await self._store.get_by_id(db, listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        return listing

    async def _load_owned(
        self, db: AsyncSession, listing_id: str, seller_id: str
    ) -> Listing:
        listing = await self._reload(db, listing_id)
        if listing.seller_id != seller_id:
            raise UnauthorizedError(listing_id)
        return listing

    async def _require_item(self, db: AsyncSession, item_id: str) -> str:
        items = await self._catalog.get_items_by_ids(db, [item_id])
        if not items:
            raise ItemNotFoundError(item_id)
        return items[0].name

    async def _item_name(self, db: AsyncSession, item_id: str) -> str:
        items = await self._catalog.get_items_by_ids(db, [item_id])
        return items[0].name if items else item_id

    async def _notify_safely(
        self,
        user_id: str,
        title: str,
        message: str,
        kind: NotificationKind,
        listing_id: str,
    ) -> None:
        try:
            await self._notifier.notify(
                user_id, title, message, kind.value, _ENTITY, listing_id
            )
        except Exception:
            # The transition is already committed.
            logger.warning(
                "notification %s for user %s failed", kind.value, user_id, exc_info=True
            )


_service: ListingLifecycleService | None = None


def get_lifecycle_service() -> ListingLifecycleService:
    """Process-wide service shared by the seller and admin routers (one lock registry)."""
    global _service  # noqa: PLW0603
    if _service is None:
        _service = ListingLifecycleService()
    return _service
