"""
Advisory signal strategy.

Asks the external advisory service for a pipe-delimited reply:

    SIGNAL_TYPE|CONFIDENCE|PRICE_TARGET|STOP_LOSS|REASONING

Any service failure or malformed reply degrades to a conservative HOLD.
"""

import math

import structlog

from ...core.exceptions import ExternalServiceError
from ...models.instrument import Instrument
from ...models.trading_signal import CandidateSignal, SignalSource, SignalType
from ..advisory_client import AdvisoryClient
from .base import SignalStrategy

logger = structlog.get_logger()

SIGNAL_SYSTEM_PROMPT = (
    "You are a professional trading algorithm. Provide precise, actionable "
    "trading signals based on market data analysis."
)

DEFAULT_ADVISORY_REASONING = "AI-generated trading signal based on market analysis."
FALLBACK_CONFIDENCE = 0.5
REPLY_FIELD_COUNT = 5


def format_volume(volume: int | None) -> str:
    """Render volume with thousands separators."""
    return f"{volume:,}" if volume is not None else "N/A"


def format_market_cap(market_cap: float | None) -> str:
    """Render market cap in billions (e.g. $2950.0B)."""
    if not market_cap:
        return "N/A"
    return f"${market_cap / 1e9:.1f}B"


def build_signal_prompt(instrument: Instrument) -> str:
    """Describe the instrument and the expected reply format."""
    return f"""Analyze {instrument.symbol} and generate a trading signal:

Current Price: ${instrument.price}
Change: {instrument.change_percent}%
Volume: {format_volume(instrument.volume)}
Market Cap: {format_market_cap(instrument.market_cap)}

Based on this data, provide:
1. Signal type (BUY/SELL/HOLD)
2. Confidence level (0-1)
3. Price target
4. Stop loss level
5. Brief reasoning

Format as: SIGNAL_TYPE|CONFIDENCE|PRICE_TARGET|STOP_LOSS|REASONING"""


def _parse_number(raw: str, field: str) -> float:
    value = float(raw.strip().lstrip("$"))
    if not math.isfinite(value):
        raise ValueError(f"{field} is not a finite number: {raw!r}")
    return value


def parse_advisory_reply(reply: str) -> CandidateSignal:
    """
    Parse a pipe-delimited advisory reply.

    Everything after the fourth pipe is reasoning, so the reason text may
    itself contain pipes.

    Raises:
        ValueError: Wrong field count, unknown signal type or non-numeric values
    """
    parts = reply.strip().split("|", REPLY_FIELD_COUNT - 1)
    if len(parts) != REPLY_FIELD_COUNT:
        raise ValueError(
            f"Expected {REPLY_FIELD_COUNT} pipe-delimited fields, got {len(parts)}"
        )

    raw_signal, raw_confidence, raw_target, raw_stop, raw_reasoning = parts

    try:
        signal_type = SignalType(raw_signal.strip().upper())
    except ValueError as e:
        raise ValueError(f"Unknown signal type: {raw_signal.strip()!r}") from e

    return CandidateSignal(
        signal_type=signal_type,
        confidence=_parse_number(raw_confidence, "confidence"),
        price_target=_parse_number(raw_target, "price target"),
        stop_loss=_parse_number(raw_stop, "stop loss"),
        reasoning=raw_reasoning.strip() or DEFAULT_ADVISORY_REASONING,
        source=SignalSource.ADVISORY,
    )


def fallback_candidate(instrument: Instrument, reasoning: str) -> CandidateSignal:
    """Conservative HOLD used whenever the advisory path cannot be trusted."""
    return CandidateSignal(
        signal_type=SignalType.HOLD,
        confidence=FALLBACK_CONFIDENCE,
        price_target=instrument.price * 1.05,
        stop_loss=instrument.price * 0.95,
        reasoning=reasoning,
        source=SignalSource.FALLBACK,
    )


class AdvisoryStrategy(SignalStrategy):
    """Signals from the external advisory service with HOLD fallback."""

    name = "advisory"

    def __init__(self, client: AdvisoryClient):
        self.client = client

    async def produce_candidate(self, instrument: Instrument) -> CandidateSignal:
        try:
            reply = await self.client.complete(
                SIGNAL_SYSTEM_PROMPT,
                build_signal_prompt(instrument),
                temperature=0.3,
                max_tokens=300,
            )
        except ExternalServiceError as e:
            logger.warning(
                "Advisory signal unavailable - using fallback",
                symbol=instrument.symbol,
                error=e.message,
            )
            return fallback_candidate(
                instrument,
                "AI analysis unavailable. Using conservative hold signal.",
            )

        try:
            return parse_advisory_reply(reply)
        except ValueError as e:
            logger.warning(
                "Advisory reply could not be parsed - using fallback",
                symbol=instrument.symbol,
                error=str(e),
                reply_preview=reply[:100],
            )
            return fallback_candidate(
                instrument,
                "AI analysis available but parsing failed. Using conservative hold signal.",
            )
