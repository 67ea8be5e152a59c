"""
Trading signal generation.

Per request:
1. Validate symbol and user id
2. Enforce the per-user rate limit
3. Load the instrument
4. Ask the selected strategy for a candidate
5. Clamp and truncate the candidate
6. Persist with a 24h expiry
"""

import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

import structlog

from ...core.config import Settings
from ...core.exceptions import InstrumentNotFoundError
from ...core.rate_limiter import RateLimiter, build_rate_limit_key
from ...core.utils.date_utils import expires_after, utcnow
from ...database.repositories.instrument_repository import InstrumentRepository
from ...database.repositories.signal_repository import SignalRepository
from ...models.trading_signal import CandidateSignal, TradingSignal
from ...shared.validators import validate_symbol, validate_user_id
from ..advisory_client import AdvisoryClient
from .advisory import AdvisoryStrategy
from .base import SignalStrategy
from .rule_based import RuleBasedStrategy

logger = structlog.get_logger()

RATE_LIMIT_OPERATION = "generate-trading-signals"


def normalize_candidate(candidate: CandidateSignal, max_reasoning: int) -> CandidateSignal:
    """
    Clamp a candidate into storable ranges.

    Confidence is clamped to [0, 1], target and stop to >= 0, and the
    reasoning truncated to ``max_reasoning`` characters.
    """
    return replace(
        candidate,
        confidence=max(0.0, min(1.0, candidate.confidence)),
        price_target=max(0.0, candidate.price_target),
        stop_loss=max(0.0, candidate.stop_loss),
        reasoning=candidate.reasoning[:max_reasoning],
    )


class SignalGenerator:
    """Generates, normalizes and stores trading signals."""

    def __init__(
        self,
        instrument_repo: InstrumentRepository,
        signal_repo: SignalRepository,
        rate_limiter: RateLimiter,
        settings: Settings,
        advisory_client: AdvisoryClient | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Initialize signal generator.

        Args:
            instrument_repo: Market data lookups
            signal_repo: Signal persistence
            rate_limiter: Per-user request limiter
            settings: Rate limit, expiry and reasoning length settings
            advisory_client: External advisory client; rule-based when None
            clock: Source of "now"
        """
        self.instrument_repo = instrument_repo
        self.signal_repo = signal_repo
        self.rate_limiter = rate_limiter
        self.settings = settings
        self.advisory_client = advisory_client
        self.clock = clock

    def select_strategy(self) -> SignalStrategy:
        """Advisory when configured, rule-based otherwise."""
        if self.advisory_client is not None:
            return AdvisoryStrategy(self.advisory_client)
        return RuleBasedStrategy()

    async def generate(self, symbol: str, user_id: str) -> TradingSignal:
        """
        Generate and store a signal for a user.

        Args:
            symbol: Ticker symbol (any case, surrounding spaces ignored)
            user_id: UUID of the requesting user

        Returns:
            The persisted signal

        Raises:
            ValidationError: Malformed symbol or user id
            RateLimitError: User exceeded the request budget
            InstrumentNotFoundError: No market data for the symbol
            PersistenceError: Signal could not be stored
        """
        validated_user_id = validate_user_id(user_id)
        validated_symbol = validate_symbol(symbol)

        await self.rate_limiter.enforce_limit(
            build_rate_limit_key(RATE_LIMIT_OPERATION, validated_user_id),
            limit=self.settings.signal_rate_limit_requests,
            window_seconds=self.settings.signal_rate_limit_window_seconds,
        )

        instrument = await self.instrument_repo.get_by_symbol(validated_symbol)
        if instrument is None:
            logger.warning("Market data fetch miss", symbol=validated_symbol)
            raise InstrumentNotFoundError(
                f"Market data not available for {validated_symbol}",
                symbol=validated_symbol,
            )

        strategy = self.select_strategy()
        logger.info(
            "Generating trading signal",
            symbol=validated_symbol,
            strategy=strategy.name,
        )
        candidate = await strategy.produce_candidate(instrument)
        candidate = normalize_candidate(
            candidate, self.settings.signal_reasoning_max_length
        )

        created_at = self.clock()
        signal = TradingSignal(
            signal_id=f"signal_{uuid.uuid4().hex[:12]}",
            user_id=validated_user_id,
            symbol=validated_symbol,
            signal_type=candidate.signal_type,
            confidence=candidate.confidence,
            price_target=candidate.price_target,
            stop_loss=candidate.stop_loss,
            reasoning=candidate.reasoning,
            source=candidate.source,
            created_at=created_at,
            expires_at=expires_after(created_at, self.settings.signal_ttl_hours),
        )

        stored = await self.signal_repo.create(signal)

        logger.info(
            "Generated trading signal",
            signal_type=stored.signal_type,
            symbol=stored.symbol,
            confidence=f"{stored.confidence * 100:.0f}%",
            source=stored.source,
        )

        return stored

    async def list_active_signals(
        self, user_id: str, limit: int = 50
    ) -> list[TradingSignal]:
        """Unexpired signals for a user, newest first."""
        validated_user_id = validate_user_id(user_id)
        return await self.signal_repo.list_active(
            validated_user_id, now=self.clock(), limit=limit
        )
