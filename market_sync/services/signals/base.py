"""Strategy interface for producing candidate signals."""

from abc import ABC, abstractmethod

from ...models.instrument import Instrument
from ...models.trading_signal import CandidateSignal


class SignalStrategy(ABC):
    """
    Produces a candidate signal from an instrument snapshot.

    Implementations must always return a usable candidate; failures of
    any collaborator are absorbed inside the strategy.
    """

    name: str = ""

    @abstractmethod
    async def produce_candidate(self, instrument: Instrument) -> CandidateSignal:
        """Propose a signal for the instrument."""
