"""
Holding model for portfolio positions.

Represents a user's position in one instrument within one portfolio.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from ..core.utils.date_utils import utcnow


class Holding(BaseModel):
    """
    Position in a portfolio.

    Valuation fields are derived from the instrument price on each
    synchronization pass; until the first pass they are None.
    """

    holding_id: str = Field(..., description="Unique holding identifier")
    portfolio_id: str = Field(..., description="Owning portfolio")
    user_id: str = Field(..., description="Owner user ID")
    symbol: str = Field(..., description="Instrument symbol (weak reference)")
    quantity: float = Field(..., gt=0, description="Number of shares")
    average_cost: float = Field(..., gt=0, description="Average purchase price per share")
    current_price: float | None = Field(None, description="Last synchronized price")

    # Calculated fields
    market_value: float | None = Field(None, description="quantity * current_price")
    unrealized_pnl: float | None = Field(None, description="Unrealized profit/loss ($)")
    unrealized_pnl_percent: float | None = Field(None, description="Unrealized P/L (%)")

    # Metadata
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def cost_basis(self) -> float:
        """Total amount invested (quantity * average_cost)."""
        return self.quantity * self.average_cost

    model_config = {
        "json_schema_extra": {
            "example": {
                "holding_id": "holding_abc123",
                "portfolio_id": "portfolio_xyz789",
                "user_id": "5f0c8a34-2d7e-4f5b-9a51-0f3a2b7c9d11",
                "symbol": "AAPL",
                "quantity": 100,
                "average_cost": 150.50,
                "current_price": 155.25,
                "market_value": 15525.00,
                "unrealized_pnl": 475.00,
                "unrealized_pnl_percent": 3.16,
            }
        }
    }
