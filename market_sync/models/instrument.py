"""
Instrument model for market data.

One record per tradable symbol, rewritten on every synchronization pass.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from ..core.utils.date_utils import utcnow


class Instrument(BaseModel):
    """Current market data for one tradable symbol."""

    symbol: str = Field(..., description="Unique ticker symbol (e.g., AAPL)")
    price: float = Field(..., gt=0, description="Last price")
    change: float = Field(0.0, description="Absolute change vs previous price")
    change_percent: float = Field(0.0, description="Change as percent of previous price")
    volume: int | None = Field(None, ge=0, description="Traded volume")
    market_cap: float | None = Field(None, ge=0, description="Market capitalization")
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = {
        "json_schema_extra": {
            "example": {
                "symbol": "AAPL",
                "price": 189.84,
                "change": 1.23,
                "change_percent": 0.65,
                "volume": 54_210_000,
                "market_cap": 2_950_000_000_000,
                "updated_at": "2025-11-01T14:30:00Z",
            }
        }
    }
