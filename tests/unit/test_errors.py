"""Tests for tcg_common.errors and tcg_common.response."""

from datetime import UTC, datetime

import pytest

from src.tcg_common.datetime_utils import days_ago, isoformat_or_none
from src.tcg_common.errors import (
    AppError,
    ConflictError,
    ForbiddenError,
    InvalidListingAttributeError,
    InvalidPriceError,
    InvalidReasonError,
    InvalidTransitionError,
    ItemNotFoundError,
    ListingNotFoundError,
    RateLimitError,
    UnauthorizedError,
)
from src.tcg_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.http_status == 500
        assert isinstance(err, Exception)


class TestListingErrors:
    @pytest.mark.parametrize(
        "err,code,status",
        [
            (InvalidPriceError(0), 4001, 422),
            (InvalidListingAttributeError("finish", "holo"), 4003, 422),
            (ListingNotFoundError("L1"), 4004, 404),
            (UnauthorizedError("L1"), 4005, 403),
            (InvalidTransitionError("L1", "sold", "APPROVE"), 4006, 409),
            (InvalidReasonError(), 4007, 422),
            (ConflictError("seller-1"), 4008, 409),
            (ItemNotFoundError("sv1-1"), 3001, 404),
            (ForbiddenError(), 1002, 403),
            (RateLimitError(), 9001, 429),
        ],
    )
    def test_codes(self, err, code, status) -> None:
        assert err.code == code
        assert err.http_status == status

    def test_transition_message_names_status_and_event(self) -> None:
        err = InvalidTransitionError("L1", "sold", "APPROVE")
        assert "sold" in err.message and "APPROVE" in err.message


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"x": 1}, "req_abc")
        assert resp.code == 0
        assert resp.data == {"x": 1}
        assert resp.request_id == "req_abc"

    def test_error(self) -> None:
        resp = error_response(4004, "Listing not found: L1")
        assert isinstance(resp, ApiResponse)
        assert resp.code == 4004
        assert resp.data is None

    def test_error_keeps_request_id(self) -> None:
        resp = error_response(4008, "Concurrent update lost", "req_123456789abc")
        assert resp.request_id == "req_123456789abc"

    def test_fresh_request_id_when_missing(self) -> None:
        assert success_response().request_id.startswith("req_")


class TestDatetimeUtils:
    def test_days_ago(self) -> None:
        now = datetime(2026, 1, 8, tzinfo=UTC)
        assert days_ago(7, now) == datetime(2026, 1, 1, tzinfo=UTC)

    def test_isoformat_or_none(self) -> None:
        assert isoformat_or_none(None) is None
        assert isoformat_or_none(datetime(2026, 1, 1)) == "2026-01-01T00:00:00+00:00"
