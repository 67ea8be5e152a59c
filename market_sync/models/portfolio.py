"""
Portfolio model with aggregate valuation.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from ..core.utils.date_utils import utcnow
from .holding import Holding


class Portfolio(BaseModel):
    """User portfolio. Owns a set of holdings."""

    portfolio_id: str = Field(..., description="Unique portfolio identifier")
    user_id: str = Field(..., description="Portfolio owner")
    name: str = Field("My Portfolio", description="Display name")
    cash_balance: float | None = Field(None, description="Uninvested cash")

    # Aggregates written by the synchronization pass
    total_value: float = Field(0.0, description="Sum of holding market values")
    daily_change: float = Field(0.0, description="total_value minus previous total_value")
    daily_change_percent: float = Field(0.0, description="daily_change as % of previous total")

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class PortfolioSnapshot(BaseModel):
    """A portfolio read together with its holdings."""

    portfolio: Portfolio
    holdings: list[Holding]
