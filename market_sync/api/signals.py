"""
Trading signal endpoints.

- POST /api/signals/generate: create a signal (rate limited per user)
- GET /api/signals/{user_id}: list unexpired signals
"""

import structlog
from fastapi import APIRouter, Depends, Request

from ..services.signals.generator import SignalGenerator
from .dependencies.rate_limit import limiter
from .dependencies.services import get_signal_generator
from .schemas.signal_models import (
    ActiveSignalsResponse,
    GenerateSignalRequest,
    SignalResponse,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/api/signals", tags=["signals"])


@router.post("/generate", response_model=SignalResponse)
@limiter.limit("30/minute")
async def generate_signal(
    request: Request,
    body: GenerateSignalRequest,
    generator: SignalGenerator = Depends(get_signal_generator),
) -> SignalResponse:
    """
    Generate a trading signal for a symbol.

    Errors: 400 invalid input, 404 no market data, 429 rate limited
    (with Retry-After), 500 storage failure. Advisory service failures
    never surface; they degrade to a conservative HOLD.
    """
    signal = await generator.generate(body.symbol, body.user_id)
    return SignalResponse(signal=signal)


@router.get("/{user_id}", response_model=ActiveSignalsResponse)
@limiter.limit("60/minute")
async def list_active_signals(
    request: Request,
    user_id: str,
    generator: SignalGenerator = Depends(get_signal_generator),
) -> ActiveSignalsResponse:
    """List a user's unexpired signals, newest first."""
    signals = await generator.list_active_signals(user_id)
    return ActiveSignalsResponse(signals=signals, count=len(signals))
