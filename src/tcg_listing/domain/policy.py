"""ListingPolicy — the tunable constants of the listing engine.

Services receive a policy instance instead of reading settings directly so
tests can run with a different threshold or fee schedule.
"""

from dataclasses import dataclass, field

from config.settings import settings
from src.tcg_common.enums import AccountClass


def _default_fee_bps() -> dict[AccountClass, int]:
    return {
        AccountClass.INDIVIDUAL: settings.SELLER_FEE_BPS_INDIVIDUAL,
        AccountClass.BUSINESS: settings.SELLER_FEE_BPS_BUSINESS,
    }


@dataclass(frozen=True)
class ListingPolicy:
    min_activation_cents: int = field(
        default_factory=lambda: settings.LISTING_MIN_ACTIVATION_CENTS
    )
    fee_bps: dict[AccountClass, int] = field(default_factory=_default_fee_bps)
    reconcile_max_attempts: int = field(
        default_factory=lambda: settings.RECONCILE_MAX_ATTEMPTS
    )

    def fee_bps_for(self, account_class: AccountClass | str) -> int:
        """Unknown classes pay the individual rate."""
        try:
            key = AccountClass(account_class)
        except ValueError:
            key = AccountClass.INDIVIDUAL
        return self.fee_bps.get(key, self.fee_bps[AccountClass.INDIVIDUAL])
