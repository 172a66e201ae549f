"""Listing state machine — exhaustive (status, event) -> allowed targets table.

    create ──► PENDING_MINIMUM ◄──DEMOTE── PENDING_REVIEW / ACTIVE
                  │ PROMOTE                      ▲
                  ▼                              │ EDIT (from any status)
               PENDING_REVIEW ──APPROVE──► ACTIVE | PENDING_MINIMUM
                  │ REJECT
                  ▼
               REJECTED

    ACTIVE ──SELL──► SOLD         non-terminal ──CANCEL──► CANCELLED

SOLD, CANCELLED and REJECTED accept no system or moderation event; only an
owner EDIT (a fresh revision) re-enters review.
"""

from src.tcg_common.enums import ListingEvent, ListingStatus
from src.tcg_common.errors import InvalidTransitionError

_S = ListingStatus
_E = ListingEvent

TERMINAL_STATUSES = frozenset({_S.SOLD, _S.CANCELLED, _S.REJECTED})
# Listings counted toward a seller's visible (effective) value.
COUNTED_STATUSES = frozenset({_S.ACTIVE, _S.PENDING_REVIEW})
# Listings still in play for the activation threshold.
IN_PLAY_STATUSES = frozenset({_S.ACTIVE, _S.PENDING_REVIEW, _S.PENDING_MINIMUM})

_EDIT = frozenset({_S.PENDING_REVIEW})
_CANCEL = frozenset({_S.CANCELLED})
_NONE: frozenset[ListingStatus] = frozenset()

TRANSITIONS: dict[ListingStatus, dict[ListingEvent, frozenset[ListingStatus]]] = {
    _S.PENDING_MINIMUM: {
        _E.SUBMIT: _NONE,
        _E.EDIT: _EDIT,
        _E.APPROVE: _NONE,
        _E.REJECT: _NONE,
        _E.PROMOTE: frozenset({_S.PENDING_REVIEW, _S.ACTIVE}),
        _E.DEMOTE: _NONE,
        _E.SELL: _NONE,
        _E.CANCEL: _CANCEL,
    },
    _S.PENDING_REVIEW: {
        _E.SUBMIT: _NONE,
        _E.EDIT: _EDIT,
        _E.APPROVE: frozenset({_S.ACTIVE, _S.PENDING_MINIMUM}),
        _E.REJECT: frozenset({_S.REJECTED}),
        _E.PROMOTE: _NONE,
        _E.DEMOTE: frozenset({_S.PENDING_MINIMUM}),
        _E.SELL: _NONE,
        _E.CANCEL: _CANCEL,
    },
    _S.ACTIVE: {
        _E.SUBMIT: _NONE,
        _E.EDIT: _EDIT,
        _E.APPROVE: _NONE,
        _E.REJECT: _NONE,
        _E.PROMOTE: _NONE,
        _E.DEMOTE: frozenset({_S.PENDING_MINIMUM}),
        _E.SELL: frozenset({_S.SOLD}),
        _E.CANCEL: _CANCEL,
    },
    _S.REJECTED: {
        _E.SUBMIT: _NONE,
        _E.EDIT: _EDIT,
        _E.APPROVE: _NONE,
        _E.REJECT: _NONE,
        _E.PROMOTE: _NONE,
        _E.DEMOTE: _NONE,
        _E.SELL: _NONE,
        _E.CANCEL: _NONE,
    },
    _S.SOLD: {
        _E.SUBMIT: _NONE,
        _E.EDIT: _EDIT,
        _E.APPROVE: _NONE,
        _E.REJECT: _NONE,
        _E.PROMOTE: _NONE,
        _E.DEMOTE: _NONE,
        _E.SELL: _NONE,
        _E.CANCEL: _NONE,
    },
    _S.CANCELLED: {
        _E.SUBMIT: _NONE,
        _E.EDIT: _EDIT,
        _E.APPROVE: _NONE,
        _E.REJECT: _NONE,
        _E.PROMOTE: _NONE,
        _E.DEMOTE: _NONE,
        _E.SELL: _NONE,
        _E.CANCEL: _NONE,
    },
}


def allowed_targets(status: ListingStatus, event: ListingEvent) -> frozenset[ListingStatus]:
    return TRANSITIONS[ListingStatus(status)][event]


def can_apply(status: ListingStatus, event: ListingEvent) -> bool:
    return bool(allowed_targets(status, event))


def ensure_transition(
    listing_id: str,
    status: ListingStatus,
    event: ListingEvent,
    target: ListingStatus,
) -> ListingStatus:
    """Return ``target`` if (status, event) may move there, else raise 4006."""
    if target not in allowed_targets(status, event):
        raise InvalidTransitionError(listing_id, ListingStatus(status).value, event.value)
    return target


def initial_status(meets_minimum: bool) -> ListingStatus:
    return _S.PENDING_REVIEW if meets_minimum else _S.PENDING_MINIMUM
