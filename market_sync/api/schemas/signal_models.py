"""
Request/response models for signal and insight endpoints.

Input fields accept any JSON value: symbol, user id and timeframe rules
live in shared.validators, so malformed input maps to a 400 with a
readable message (or the 1D timeframe default) instead of a schema 422.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field

from ...models.insight import Insight
from ...models.trading_signal import TradingSignal


class GenerateSignalRequest(BaseModel):
    """Body of POST /api/signals/generate."""

    symbol: Any = Field(None, description="Ticker symbol")
    user_id: Any = Field(
        None,
        validation_alias=AliasChoices("user_id", "userId"),
        description="Requesting user (UUID), already authenticated upstream",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "symbol": "AAPL",
                "user_id": "5f0c8a34-2d7e-4f5b-9a51-0f3a2b7c9d11",
            }
        }
    }


class SignalResponse(BaseModel):
    """Envelope for a generated signal."""

    signal: TradingSignal


class ActiveSignalsResponse(BaseModel):
    """Envelope for a user's unexpired signals."""

    signals: list[TradingSignal]
    count: int


class InsightsRequest(BaseModel):
    """Body of POST /api/insights."""

    symbol: Any = Field(None, description="Ticker symbol")
    timeframe: Any = Field("1D", description="1D, 1W, 1M, 3M, 6M or 1Y; anything else means 1D")


class InsightsResponse(BaseModel):
    """Envelope for insights."""

    insights: list[Insight]
