"""Tests for seller fee calculation and cents helpers."""

import pytest

from src.tcg_common.cents import apply_bps_rounded, cents_to_display, major_to_cents
from src.tcg_common.enums import AccountClass
from src.tcg_listing.domain.fee import calculate_seller_fee, fee_label
from src.tcg_listing.domain.policy import ListingPolicy


class TestCalculateSellerFee:
    def test_individual_five_percent(self, policy) -> None:
        fee = calculate_seller_fee(1000, AccountClass.INDIVIDUAL, policy)
        assert fee.fee_cents == 50
        assert fee.net_cents == 950
        assert fee.rate_bps == 500

    def test_business_two_percent(self, policy) -> None:
        fee = calculate_seller_fee(1000, AccountClass.BUSINESS, policy)
        assert fee.fee_cents == 20
        assert fee.net_cents == 980

    def test_accepts_plain_string_class(self, policy) -> None:
        assert calculate_seller_fee(1000, "business", policy).fee_cents == 20

    def test_unknown_class_pays_individual_rate(self, policy) -> None:
        assert calculate_seller_fee(1000, "wholesale", policy).fee_cents == 50

    @pytest.mark.parametrize("price", [1, 9, 10, 11, 650, 999, 12345])
    def test_fee_plus_net_equals_price(self, policy, price) -> None:
        fee = calculate_seller_fee(price, AccountClass.INDIVIDUAL, policy)
        assert fee.fee_cents + fee.net_cents == price
        assert fee.fee_cents >= 0

    def test_rounds_half_up(self, policy) -> None:
        # 10 * 5% = 0.5 -> 1 ; 9 * 5% = 0.45 -> 0
        assert calculate_seller_fee(10, AccountClass.INDIVIDUAL, policy).fee_cents == 1
        assert calculate_seller_fee(9, AccountClass.INDIVIDUAL, policy).fee_cents == 0

    def test_policy_override(self) -> None:
        custom = ListingPolicy(
            min_activation_cents=100,
            fee_bps={AccountClass.INDIVIDUAL: 1000, AccountClass.BUSINESS: 0},
            reconcile_max_attempts=1,
        )
        assert calculate_seller_fee(1000, AccountClass.INDIVIDUAL, custom).fee_cents == 100
        assert calculate_seller_fee(1000, AccountClass.BUSINESS, custom).fee_cents == 0


class TestFeeLabel:
    def test_labels(self, policy) -> None:
        assert fee_label(AccountClass.INDIVIDUAL, policy) == "5%"
        assert fee_label(AccountClass.BUSINESS, policy) == "2%"


class TestCents:
    def test_apply_bps_zero(self) -> None:
        assert apply_bps_rounded(0, 500) == 0
        assert apply_bps_rounded(1000, 0) == 0

    def test_display(self) -> None:
        assert cents_to_display(650, "R$") == "R$6.50"
        assert cents_to_display(123456, "R$") == "R$1,234.56"
        assert cents_to_display(-1200, "R$") == "-R$12.00"

    def test_major_to_cents(self) -> None:
        assert major_to_cents(7) == 700
        assert major_to_cents(7.5) == 750
        assert major_to_cents(0.1) == 10

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_major_to_cents_rejects_non_finite(self, value) -> None:
        with pytest.raises(ValueError, match="finite"):
            major_to_cents(value)
