"""
Holding and portfolio valuation.

Pure functions: no I/O, persistence is the caller's job. Recomputing with
the same inputs always yields the same output.
"""

from collections.abc import Iterable
from datetime import datetime

from ..models.holding import Holding
from ..models.instrument import Instrument
from ..models.portfolio import Portfolio


def recompute_holding(
    holding: Holding, instrument: Instrument, now: datetime
) -> Holding:
    """
    Revalue a holding at the instrument's latest price.

    Args:
        holding: Stored holding
        instrument: Freshly updated instrument with the same symbol
        now: Timestamp for updated_at

    Returns:
        Copy of the holding with current_price, market_value and P/L set
    """
    cost_basis = holding.cost_basis
    market_value = holding.quantity * instrument.price
    unrealized_pnl = market_value - cost_basis
    # quantity > 0 and average_cost > 0 are model invariants
    unrealized_pnl_percent = unrealized_pnl / cost_basis * 100

    return holding.model_copy(
        update={
            "current_price": instrument.price,
            "market_value": market_value,
            "unrealized_pnl": unrealized_pnl,
            "unrealized_pnl_percent": unrealized_pnl_percent,
            "updated_at": now,
        }
    )


def aggregate_portfolio(
    portfolio: Portfolio, holdings: Iterable[Holding], now: datetime
) -> Portfolio:
    """
    Sum holding market values into the portfolio total.

    The daily change is measured against the portfolio's stored total, so
    ``portfolio`` must be the record as read before this pass. A previous
    total of 0 (first sync) yields a 0 percent change.

    Holdings never valued yet contribute 0.
    """
    total_value = sum((h.market_value or 0.0 for h in holdings), 0.0)
    previous_total = portfolio.total_value
    daily_change = total_value - previous_total
    daily_change_percent = (
        daily_change / previous_total * 100 if previous_total > 0 else 0.0
    )

    return portfolio.model_copy(
        update={
            "total_value": total_value,
            "daily_change": daily_change,
            "daily_change_percent": daily_change_percent,
            "updated_at": now,
        }
    )
