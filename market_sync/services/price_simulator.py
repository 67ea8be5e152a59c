"""
Simulated market feed.

Produces the next quote for an instrument as a bounded random walk step
around its previous price. Values are rounded to cents before storage so
repeated passes do not accumulate floating drift.
"""

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class PriceQuote:
    """One simulated price tick."""

    price: float
    change: float
    change_percent: float


def simulate_price(
    previous_price: float,
    volatility: float,
    rng: random.Random | None = None,
) -> PriceQuote:
    """
    Draw the next price from a uniform band around the previous one.

    The relative offset is uniform in [-volatility/2, +volatility/2].

    Args:
        previous_price: Last stored price (must be positive, caller-validated)
        volatility: Width of the relative band, in (0, 1)
        rng: Random source; the module-level generator when omitted

    Returns:
        PriceQuote with price, change and change_percent rounded to 2 decimals

    Example:
        >>> quote = simulate_price(100.0, 0.02, random.Random(7))
        >>> 99.0 <= quote.price <= 101.0
        True
    """
    source = rng or random
    offset = source.uniform(-volatility / 2, volatility / 2)
    new_price = previous_price * (1 + offset)
    price = round(new_price, 2)
    change = round(new_price - previous_price, 2)

    return PriceQuote(
        price=price,
        change=change,
        change_percent=round(change / previous_price * 100, 2),
    )


def simulate_volume(
    low: int,
    high: int,
    rng: random.Random | None = None,
) -> int:
    """Draw a fresh traded volume in [low, high)."""
    source = rng or random
    return source.randrange(low, high)
