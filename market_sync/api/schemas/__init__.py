"""
Request and response schemas for the HTTP adapter.
"""

from .portfolio_models import AddHoldingRequest, HoldingResponse
from .signal_models import (
    ActiveSignalsResponse,
    GenerateSignalRequest,
    InsightsRequest,
    InsightsResponse,
    SignalResponse,
)

__all__ = [
    "ActiveSignalsResponse",
    "AddHoldingRequest",
    "GenerateSignalRequest",
    "HoldingResponse",
    "InsightsRequest",
    "InsightsResponse",
    "SignalResponse",
]
