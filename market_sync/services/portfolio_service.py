"""
Portfolio reads and holding creation.

New holdings are valued at the latest stored market price right away;
the portfolio totals only move on the next synchronization pass.
"""

import uuid
from collections.abc import Callable
from datetime import datetime

import structlog

from ..core.exceptions import PortfolioNotFoundError
from ..core.utils.date_utils import utcnow
from ..database.repositories.holding_repository import HoldingRepository
from ..database.repositories.instrument_repository import InstrumentRepository
from ..database.repositories.portfolio_repository import PortfolioRepository
from ..models.holding import Holding
from ..models.portfolio import Portfolio, PortfolioSnapshot
from ..shared.validators import (
    validate_average_cost,
    validate_quantity,
    validate_symbol,
    validate_user_id,
)
from .valuation import recompute_holding

logger = structlog.get_logger()


class PortfolioService:
    """Reads a user's portfolio and adds positions to it."""

    def __init__(
        self,
        portfolio_repo: PortfolioRepository,
        holding_repo: HoldingRepository,
        instrument_repo: InstrumentRepository,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.portfolio_repo = portfolio_repo
        self.holding_repo = holding_repo
        self.instrument_repo = instrument_repo
        self.clock = clock

    async def _require_portfolio(self, user_id: str) -> Portfolio:
        portfolio = await self.portfolio_repo.get_by_user(user_id)
        if portfolio is None:
            raise PortfolioNotFoundError("Portfolio not found", user_id=user_id)
        return portfolio

    async def get_portfolio(self, user_id: str) -> PortfolioSnapshot:
        """
        Get the user's portfolio with all of its holdings.

        Raises:
            ValidationError: Malformed user id
            PortfolioNotFoundError: User has no portfolio
        """
        validated_user_id = validate_user_id(user_id)
        portfolio = await self._require_portfolio(validated_user_id)
        holdings = await self.holding_repo.list_by_portfolio(portfolio.portfolio_id)
        return PortfolioSnapshot(portfolio=portfolio, holdings=holdings)

    async def add_holding(
        self,
        user_id: str,
        symbol: str,
        quantity: float,
        average_cost: float,
    ) -> Holding:
        """
        Add a position to the user's portfolio.

        All inputs are validated before any lookup. When the symbol has no
        market data yet the holding starts at its average cost and is
        valued by the first synchronization pass that prices it.

        Args:
            user_id: Owner (UUID)
            symbol: Ticker symbol
            quantity: Shares, in (0, 1,000,000]
            average_cost: Price paid per share, in (0, 100,000]

        Returns:
            The stored holding

        Raises:
            ValidationError: Any malformed input
            PortfolioNotFoundError: User has no portfolio
            PersistenceError: Insert failed
        """
        validated_user_id = validate_user_id(user_id)
        validated_symbol = validate_symbol(symbol)
        validated_quantity = validate_quantity(quantity)
        validated_cost = validate_average_cost(average_cost)

        portfolio = await self._require_portfolio(validated_user_id)
        instrument = await self.instrument_repo.get_by_symbol(validated_symbol)
        now = self.clock()

        holding = Holding(
            holding_id=f"holding_{uuid.uuid4().hex[:12]}",
            portfolio_id=portfolio.portfolio_id,
            user_id=validated_user_id,
            symbol=validated_symbol,
            quantity=validated_quantity,
            average_cost=validated_cost,
            current_price=validated_cost,
            created_at=now,
            updated_at=now,
        )
        if instrument is not None:
            holding = recompute_holding(holding, instrument, now)
        else:
            logger.info(
                "No market data for new holding - valued at average cost",
                symbol=validated_symbol,
            )

        return await self.holding_repo.create(holding)
