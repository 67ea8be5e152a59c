"""
Repositories for MongoDB collections.
"""

from .holding_repository import HoldingRepository
from .instrument_repository import InstrumentRepository
from .portfolio_repository import PortfolioRepository
from .signal_repository import SignalRepository

__all__ = [
    "HoldingRepository",
    "InstrumentRepository",
    "PortfolioRepository",
    "SignalRepository",
]
