"""Tests for the listing transition table."""

import pytest

from src.tcg_common.enums import ListingEvent, ListingStatus
from src.tcg_common.errors import InvalidTransitionError
from src.tcg_listing.domain.state_machine import (
    TERMINAL_STATUSES,
    TRANSITIONS,
    allowed_targets,
    can_apply,
    ensure_transition,
    initial_status,
)

S = ListingStatus
E = ListingEvent


class TestTableShape:
    def test_every_status_event_pair_is_defined(self) -> None:
        for status in ListingStatus:
            assert set(TRANSITIONS[status]) == set(ListingEvent)

    def test_submit_is_never_a_transition(self) -> None:
        # creation picks the initial status directly
        assert all(not can_apply(s, E.SUBMIT) for s in ListingStatus)


class TestAllowedMoves:
    @pytest.mark.parametrize(
        "status,event,target",
        [
            (S.PENDING_MINIMUM, E.PROMOTE, S.PENDING_REVIEW),
            (S.PENDING_MINIMUM, E.PROMOTE, S.ACTIVE),
            (S.PENDING_REVIEW, E.APPROVE, S.ACTIVE),
            (S.PENDING_REVIEW, E.APPROVE, S.PENDING_MINIMUM),
            (S.PENDING_REVIEW, E.REJECT, S.REJECTED),
            (S.PENDING_REVIEW, E.DEMOTE, S.PENDING_MINIMUM),
            (S.ACTIVE, E.DEMOTE, S.PENDING_MINIMUM),
            (S.ACTIVE, E.SELL, S.SOLD),
            (S.ACTIVE, E.CANCEL, S.CANCELLED),
        ],
    )
    def test_allowed(self, status, event, target) -> None:
        assert ensure_transition("L1", status, event, target) == target

    @pytest.mark.parametrize("status", list(ListingStatus))
    def test_edit_from_any_status_goes_to_review(self, status) -> None:
        assert allowed_targets(status, E.EDIT) == frozenset({S.PENDING_REVIEW})


class TestRejectedMoves:
    @pytest.mark.parametrize(
        "status,event,target",
        [
            (S.ACTIVE, E.APPROVE, S.ACTIVE),
            (S.REJECTED, E.APPROVE, S.ACTIVE),
            (S.ACTIVE, E.REJECT, S.REJECTED),
            (S.PENDING_MINIMUM, E.APPROVE, S.ACTIVE),
            (S.PENDING_MINIMUM, E.SELL, S.SOLD),
            (S.PENDING_REVIEW, E.PROMOTE, S.ACTIVE),
            (S.PENDING_REVIEW, E.APPROVE, S.REJECTED),
        ],
    )
    def test_raises(self, status, event, target) -> None:
        with pytest.raises(InvalidTransitionError) as exc_info:
            ensure_transition("L1", status, event, target)
        assert exc_info.value.code == 4006
        assert exc_info.value.http_status == 409

    @pytest.mark.parametrize("status", sorted(TERMINAL_STATUSES))
    def test_terminal_statuses_ignore_system_events(self, status) -> None:
        for event in (E.PROMOTE, E.DEMOTE, E.APPROVE, E.REJECT, E.SELL, E.CANCEL):
            assert not can_apply(status, event)


class TestInitialStatus:
    def test_meets_minimum(self) -> None:
        assert initial_status(True) == S.PENDING_REVIEW

    def test_below_minimum(self) -> None:
        assert initial_status(False) == S.PENDING_MINIMUM
