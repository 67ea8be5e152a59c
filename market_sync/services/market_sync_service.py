"""
Market data synchronization pass.

One pass:
1. Simulates a new quote for every instrument and stores it
2. Revalues every holding whose instrument was updated
3. Re-aggregates every portfolio from its holdings

Per-item failures are logged and counted; the pass keeps going and
reports them in the returned SyncSummary.
"""

import asyncio
import random
from dataclasses import dataclass

import structlog

from ..core.config import Settings
from ..core.exceptions import NotFoundError
from ..core.utils.date_utils import utcnow
from ..database.repositories.holding_repository import HoldingRepository
from ..database.repositories.instrument_repository import InstrumentRepository
from ..database.repositories.portfolio_repository import PortfolioRepository
from ..models.instrument import Instrument
from ..models.portfolio import Portfolio
from ..models.sync_summary import SyncSummary
from .price_simulator import simulate_price, simulate_volume
from .valuation import aggregate_portfolio, recompute_holding

logger = structlog.get_logger()


@dataclass
class PortfolioSyncOutcome:
    """Result of syncing one portfolio."""

    holdings_updated: int = 0
    holdings_failed: int = 0
    portfolio_written: bool = False


class MarketSyncService:
    """Runs synchronization passes over instruments, holdings and portfolios."""

    def __init__(
        self,
        instrument_repo: InstrumentRepository,
        holding_repo: HoldingRepository,
        portfolio_repo: PortfolioRepository,
        settings: Settings,
        rng: random.Random | None = None,
    ):
        """
        Initialize synchronization service.

        Args:
            instrument_repo: Market data persistence
            holding_repo: Holding persistence
            portfolio_repo: Portfolio persistence
            settings: Application settings (volatility, volume range, concurrency)
            rng: Random source for the simulated feed
        """
        self.instrument_repo = instrument_repo
        self.holding_repo = holding_repo
        self.portfolio_repo = portfolio_repo
        self.settings = settings
        self.rng = rng or random.Random()

    async def run_sync_pass(self) -> SyncSummary:
        """
        Run one full synchronization pass.

        Returns:
            Summary with per-stage success and failure counts

        Raises:
            NotFoundError: If there is no market data at all
            DatabaseError: If instruments or portfolios cannot be listed
        """
        now = utcnow()
        logger.info("Updating market data")

        instruments = await self.instrument_repo.list_all()
        if not instruments:
            raise NotFoundError("No market data found to update")

        instrument_slots = asyncio.Semaphore(self.settings.sync_concurrency)
        results = await asyncio.gather(
            *(
                self._update_instrument(instrument, instrument_slots)
                for instrument in instruments
            )
        )

        updated = {inst.symbol: inst for inst in results if inst is not None}
        failed_symbols = [
            instrument.symbol
            for instrument, result in zip(instruments, results)
            if result is None
        ]

        portfolios = await self.portfolio_repo.list_all()
        portfolio_slots = asyncio.Semaphore(self.settings.sync_concurrency)
        outcomes = await asyncio.gather(
            *(
                self._sync_portfolio(portfolio, updated, portfolio_slots)
                for portfolio in portfolios
            )
        )

        summary = SyncSummary(
            updated_count=len(updated),
            failed_symbols=failed_symbols,
            holdings_updated=sum(o.holdings_updated for o in outcomes),
            holdings_failed=sum(o.holdings_failed for o in outcomes),
            portfolios_updated=sum(1 for o in outcomes if o.portfolio_written),
            portfolios_failed=sum(1 for o in outcomes if not o.portfolio_written),
            timestamp=now,
        )

        logger.info(
            "Synchronization pass completed",
            updated_count=summary.updated_count,
            failed_symbols=summary.failed_symbols,
            holdings_updated=summary.holdings_updated,
            holdings_failed=summary.holdings_failed,
            portfolios_updated=summary.portfolios_updated,
            portfolios_failed=summary.portfolios_failed,
        )

        return summary

    async def _update_instrument(
        self, instrument: Instrument, slots: asyncio.Semaphore
    ) -> Instrument | None:
        """Simulate and store the next quote. Returns None on failure."""
        quote = simulate_price(
            instrument.price, self.settings.price_volatility, self.rng
        )
        volume = simulate_volume(
            self.settings.volume_min, self.settings.volume_max, self.rng
        )

        async with slots:
            try:
                stored = await self.instrument_repo.update_quote(
                    symbol=instrument.symbol,
                    price=quote.price,
                    change=quote.change,
                    change_percent=quote.change_percent,
                    volume=volume,
                    updated_at=utcnow(),
                )
            except Exception as e:
                logger.error(
                    "Error updating market data",
                    symbol=instrument.symbol,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return None

        if stored is None:
            logger.warning("Instrument vanished during update", symbol=instrument.symbol)
            return None

        logger.info(
            "Updated market data",
            symbol=stored.symbol,
            price=stored.price,
            change_percent=f"{stored.change_percent:+.2f}%",
        )
        return stored

    async def _sync_portfolio(
        self,
        portfolio: Portfolio,
        updated: dict[str, Instrument],
        slots: asyncio.Semaphore,
    ) -> PortfolioSyncOutcome:
        """
        Revalue a portfolio's holdings and write its new totals.

        Holdings are written one at a time inside the portfolio's slot, so a
        record never has two concurrent writers.
        """
        outcome = PortfolioSyncOutcome()

        async with slots:
            try:
                holdings = await self.holding_repo.list_by_portfolio(
                    portfolio.portfolio_id
                )
            except Exception as e:
                logger.error(
                    "Failed to load holdings",
                    portfolio_id=portfolio.portfolio_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return outcome

            valued = []
            for holding in holdings:
                instrument = updated.get(holding.symbol)
                if instrument is None:
                    # No fresh price this pass - keep stored valuation
                    valued.append(holding)
                    continue

                recomputed = recompute_holding(holding, instrument, utcnow())
                try:
                    await self.holding_repo.update_valuation(recomputed)
                except Exception as e:
                    logger.warning(
                        "Failed to update holding",
                        holding_id=holding.holding_id,
                        portfolio_id=portfolio.portfolio_id,
                        symbol=holding.symbol,
                        error=str(e),
                    )
                    outcome.holdings_failed += 1
                    valued.append(holding)
                    continue

                outcome.holdings_updated += 1
                valued.append(recomputed)

            aggregated = aggregate_portfolio(portfolio, valued, utcnow())
            try:
                await self.portfolio_repo.update_totals(aggregated)
            except Exception as e:
                logger.error(
                    "Failed to update portfolio totals",
                    portfolio_id=portfolio.portfolio_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return outcome

        outcome.portfolio_written = True
        return outcome
