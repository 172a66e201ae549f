"""Integer arithmetic utilities for cents-based prices.

Prices, fees and payouts are int cents throughout. Floats appear only at the
query-string boundary (major_to_cents).
"""

import math

from config.settings import settings


def cents_to_display(cents: int, symbol: str | None = None) -> str:
    """Convert cents to display string: 650 -> 'R$6.50', -1200 -> '-R$12.00'."""
    sym = settings.CURRENCY_SYMBOL if symbol is None else symbol
    if cents < 0:
        abs_cents = -cents
        return f"-{sym}{abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"{sym}{cents // 100:,}.{cents % 100:02d}"


def apply_bps_rounded(amount: int, bps: int) -> int:
    """Round-half-up share of ``amount`` at ``bps`` basis points.

    share = floor((amount * bps + 5000) / 10000) for non-negative amounts.
    """
    if amount == 0 or bps == 0:
        return 0
    return (amount * bps + 5000) // 10000


def major_to_cents(value: int | float) -> int:
    """Convert a major-unit amount (e.g. 7 or 7.5) to cents."""
    if not math.isfinite(value):
        raise ValueError(f"Amount must be finite, got {value}")
    return int(round(value * 100))
