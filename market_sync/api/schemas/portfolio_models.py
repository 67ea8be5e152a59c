"""
Request/response models for portfolio endpoints.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field

from ...models.holding import Holding


class AddHoldingRequest(BaseModel):
    """Body of POST /api/portfolios/{user_id}/holdings. Values are checked by shared.validators."""

    symbol: Any = Field(None, description="Ticker symbol")
    quantity: Any = Field(None, description="Number of shares, up to 1,000,000")
    average_cost: Any = Field(
        None,
        validation_alias=AliasChoices("average_cost", "averageCost"),
        description="Price paid per share, up to 100,000",
    )

    model_config = {
        "json_schema_extra": {
            "example": {"symbol": "AAPL", "quantity": 10, "average_cost": 150.25}
        }
    }


class HoldingResponse(BaseModel):
    """Envelope for a created holding."""

    holding: Holding
