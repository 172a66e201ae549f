"""Threshold reconciliation — pure planning over one seller's listings.

The activation threshold gates on the in-play value: the summed price of
every listing in ACTIVE, PENDING_REVIEW or PENDING_MINIMUM. One snapshot of
that value drives the whole plan:

  in_play >= threshold  PENDING_MINIMUM -> ACTIVE (already approved)
                        PENDING_MINIMUM -> PENDING_REVIEW (otherwise)
  in_play <  threshold  ACTIVE / PENDING_REVIEW -> PENDING_MINIMUM

After the plan is applied every in-play listing sits on the same side of the
threshold, so effective_value (ACTIVE + PENDING_REVIEW) equals the in-play
value when it clears the threshold and zero otherwise. Re-planning the result
yields no changes.
"""

from collections.abc import Collection, Iterable

from src.tcg_common.enums import ListingEvent, ListingStatus
from src.tcg_listing.domain.models import Listing, StatusChange
from src.tcg_listing.domain.state_machine import (
    COUNTED_STATUSES,
    IN_PLAY_STATUSES,
    ensure_transition,
)


def effective_value(listings: Iterable[Listing]) -> int:
    """Sum of prices over ACTIVE and PENDING_REVIEW listings."""
    return sum(lst.price_cents for lst in listings if lst.status in COUNTED_STATUSES)


def in_play_value(listings: Iterable[Listing]) -> int:
    """Sum of prices over listings still competing for visibility."""
    return sum(lst.price_cents for lst in listings if lst.status in IN_PLAY_STATUSES)


def plan_reconciliation(
    listings: Iterable[Listing],
    threshold: int,
    exempt: Collection[str] = (),
) -> list[StatusChange]:
    """Status changes that bring ``listings`` in line with ``threshold``.

    ``exempt`` ids are counted in the snapshot but never moved.
    """
    snapshot = list(listings)
    meets = in_play_value(snapshot) >= threshold
    changes: list[StatusChange] = []
    for lst in snapshot:
        if lst.id in exempt:
            continue
        if meets and lst.status == ListingStatus.PENDING_MINIMUM:
            target = ListingStatus.ACTIVE if lst.is_approved else ListingStatus.PENDING_REVIEW
            event = ListingEvent.PROMOTE
        elif not meets and lst.status in COUNTED_STATUSES:
            target = ListingStatus.PENDING_MINIMUM
            event = ListingEvent.DEMOTE
        else:
            continue
        ensure_transition(lst.id, lst.status, event, target)
        changes.append(StatusChange(lst.id, ListingStatus(lst.status), target, event))
    return changes


def is_converged(listings: Iterable[Listing], threshold: int) -> bool:
    """True when no listing sits on the wrong side of the threshold."""
    snapshot = list(listings)
    value = effective_value(snapshot)
    for lst in snapshot:
        if lst.status == ListingStatus.PENDING_MINIMUM and value >= threshold:
            return False
        if lst.status in COUNTED_STATUSES and value < threshold:
            return False
    return True
