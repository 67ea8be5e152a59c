"""
Domain models for market data, portfolios and trading signals.
"""

from .holding import Holding
from .insight import Insight
from .instrument import Instrument
from .portfolio import Portfolio, PortfolioSnapshot
from .sync_summary import SyncSummary
from .trading_signal import CandidateSignal, SignalSource, SignalType, TradingSignal

__all__ = [
    "CandidateSignal",
    "Holding",
    "Insight",
    "Instrument",
    "Portfolio",
    "PortfolioSnapshot",
    "SignalSource",
    "SignalType",
    "SyncSummary",
    "TradingSignal",
]
