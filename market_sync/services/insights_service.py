"""
Read-only market insights.

Never persists and is not rate limited. Apart from bad input and
missing market data, every failure degrades to a placeholder insight so
callers can simply poll again later.
"""

from collections.abc import Callable
from datetime import datetime

import structlog

from ..core.exceptions import InstrumentNotFoundError, NotFoundError, ValidationError
from ..core.utils.date_utils import utcnow
from ..database.repositories.instrument_repository import InstrumentRepository
from ..models.insight import Insight
from ..models.instrument import Instrument
from ..shared.validators import validate_symbol, validate_timeframe
from .advisory_client import AdvisoryClient
from .signals.advisory import format_market_cap, format_volume

logger = structlog.get_logger()

INSIGHTS_SYSTEM_PROMPT = (
    "You are an expert financial analyst providing concise, actionable trading "
    "insights. Focus on technical analysis, market sentiment, and risk assessment."
)

AI_ANALYSIS_CONFIDENCE = 0.85
UNAVAILABLE_MESSAGE = "AI analysis temporarily unavailable. Please try again later."


def build_insights_prompt(instrument: Instrument, timeframe: str) -> str:
    """Describe the instrument and ask for three insights."""
    return f"""Analyze the following stock data for {instrument.symbol} and provide trading insights:

Current Price: ${instrument.price}
Change: {instrument.change_percent}%
Volume: {format_volume(instrument.volume)}
Market Cap: {format_market_cap(instrument.market_cap)}
Timeframe: {timeframe}

Please provide 3 specific insights:
1. Technical Analysis insight
2. Market Sentiment insight
3. Risk Assessment insight

Format your response as actionable insights for a trader. Be concise and specific."""


def template_insights(symbol: str, timeframe: str, now: datetime) -> list[Insight]:
    """Canned insights served when the advisory service is not configured."""
    return [
        Insight(
            type="Technical Analysis",
            message=(
                f"{symbol} is showing strong momentum with bullish patterns "
                f"forming on the {timeframe} chart."
            ),
            confidence=0.78,
            timestamp=now,
        ),
        Insight(
            type="Market Sentiment",
            message=(
                "Overall market sentiment remains positive with increasing "
                "institutional interest."
            ),
            confidence=0.65,
            timestamp=now,
        ),
        Insight(
            type="Risk Assessment",
            message="Moderate risk levels detected. Consider position sizing carefully.",
            confidence=0.72,
            timestamp=now,
        ),
    ]


def unavailable_insight(now: datetime) -> Insight:
    """Placeholder returned instead of an error."""
    return Insight(
        type="System Notice",
        message=UNAVAILABLE_MESSAGE,
        confidence=0.5,
        timestamp=now,
    )


class InsightsService:
    """Fetches AI market commentary for a symbol."""

    def __init__(
        self,
        instrument_repo: InstrumentRepository,
        advisory_client: AdvisoryClient | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.instrument_repo = instrument_repo
        self.advisory_client = advisory_client
        self.clock = clock

    async def fetch_insights(self, symbol: str, timeframe: str = "1D") -> list[Insight]:
        """
        Get insights for a symbol.

        Args:
            symbol: Ticker symbol
            timeframe: Chart timeframe; unknown values become 1D

        Returns:
            Insight list (three templates, one AI analysis, or one notice)

        Raises:
            ValidationError: Malformed symbol
            InstrumentNotFoundError: No market data for the symbol
        """
        validated_symbol = validate_symbol(symbol)
        validated_timeframe = validate_timeframe(timeframe)
        now = self.clock()

        if self.advisory_client is None:
            logger.info("AI insights disabled - no advisory service configured")
            return template_insights(validated_symbol, validated_timeframe, now)

        try:
            instrument = await self.instrument_repo.get_by_symbol(validated_symbol)
            if instrument is None:
                raise InstrumentNotFoundError(
                    f"Market data not available for {validated_symbol}",
                    symbol=validated_symbol,
                )

            reply = await self.advisory_client.complete(
                INSIGHTS_SYSTEM_PROMPT,
                build_insights_prompt(instrument, validated_timeframe),
                temperature=0.7,
                max_tokens=500,
            )
        except (ValidationError, NotFoundError):
            raise
        except Exception as e:
            logger.error(
                "Insight fetch failed - returning placeholder",
                symbol=validated_symbol,
                error=str(e),
                error_type=type(e).__name__,
            )
            return [unavailable_insight(now)]

        return [
            Insight(
                type="AI Analysis",
                message=reply,
                confidence=AI_ANALYSIS_CONFIDENCE,
                timestamp=now,
            )
        ]
