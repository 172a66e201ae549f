"""Seller fee calculation — commission and net payout per account class."""

from dataclasses import dataclass

from src.tcg_common.cents import apply_bps_rounded
from src.tcg_common.enums import AccountClass
from src.tcg_listing.domain.policy import ListingPolicy


@dataclass(frozen=True)
class FeeBreakdown:
    fee_cents: int
    net_cents: int
    rate_bps: int


def calculate_seller_fee(
    price_cents: int,
    account_class: AccountClass | str,
    policy: ListingPolicy | None = None,
) -> FeeBreakdown:
    """fee = round_half_up(price x bps / 10000); net = price - fee.

    individual: 500 bps (5%), business: 200 bps (2%) by default.
    """
    bps = (policy or ListingPolicy()).fee_bps_for(account_class)
    fee = apply_bps_rounded(price_cents, bps)
    return FeeBreakdown(fee_cents=fee, net_cents=price_cents - fee, rate_bps=bps)


def fee_label(account_class: AccountClass | str, policy: ListingPolicy | None = None) -> str:
    """Whole-percent label of the seller rate: 500 bps -> '5%'."""
    bps = (policy or ListingPolicy()).fee_bps_for(account_class)
    return f"{round(bps / 100)}%"
