"""
Trading signal models.

CandidateSignal is what a strategy proposes; TradingSignal is the
normalized, persisted and immutable record.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class SignalType(str, Enum):
    """Directional recommendation."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class SignalSource(str, Enum):
    """Which strategy produced the signal."""

    RULE_BASED = "rule_based"
    ADVISORY = "advisory"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class CandidateSignal:
    """Unvalidated strategy output. Values may be out of range until normalized."""

    signal_type: SignalType
    confidence: float
    price_target: float
    stop_loss: float
    reasoning: str
    source: SignalSource


class TradingSignal(BaseModel):
    """Persisted trading signal. Never mutated after creation."""

    signal_id: str = Field(..., description="Unique signal identifier")
    user_id: str = Field(..., description="Requesting user")
    symbol: str = Field(..., description="Instrument symbol")
    signal_type: SignalType = Field(..., description="BUY, SELL or HOLD")
    confidence: float = Field(..., ge=0, le=1, description="Confidence score 0-1")
    price_target: float = Field(..., ge=0, description="Target price")
    stop_loss: float = Field(..., ge=0, description="Stop loss level")
    reasoning: str = Field(..., description="Bounded-length explanation")
    source: SignalSource = Field(SignalSource.RULE_BASED, description="Producing strategy")
    created_at: datetime
    expires_at: datetime

    model_config = {"frozen": True, "use_enum_values": True}
