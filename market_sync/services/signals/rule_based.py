"""
Rule-based signal strategy.

Momentum thresholds on the last change percent:
- change > +2%: BUY  (confidence 0.75, target +10%, stop -5%)
- change < -3%: SELL (confidence 0.70, target -10%, stop +5%)
- otherwise:    HOLD (confidence 0.60, target +5%, stop -5%)
"""

from ...models.instrument import Instrument
from ...models.trading_signal import CandidateSignal, SignalSource, SignalType
from .base import SignalStrategy

BUY_THRESHOLD_PERCENT = 2.0
SELL_THRESHOLD_PERCENT = -3.0


class RuleBasedStrategy(SignalStrategy):
    """Deterministic momentum rules. Always available."""

    name = "rule_based"

    async def produce_candidate(self, instrument: Instrument) -> CandidateSignal:
        return self.evaluate(instrument)

    @staticmethod
    def evaluate(instrument: Instrument) -> CandidateSignal:
        """Apply the momentum rules synchronously."""
        change = instrument.change_percent or 0.0
        price = instrument.price

        if change > BUY_THRESHOLD_PERCENT:
            return CandidateSignal(
                signal_type=SignalType.BUY,
                confidence=0.75,
                price_target=price * 1.10,
                stop_loss=price * 0.95,
                reasoning=(
                    f"Strong upward momentum (+{change:.2f}%) suggests continued "
                    "bullish trend. High volume supports the move."
                ),
                source=SignalSource.RULE_BASED,
            )

        if change < SELL_THRESHOLD_PERCENT:
            return CandidateSignal(
                signal_type=SignalType.SELL,
                confidence=0.70,
                price_target=price * 0.90,
                stop_loss=price * 1.05,
                reasoning=(
                    f"Significant downward pressure ({change:.2f}%) indicates "
                    "potential further decline. Consider risk management."
                ),
                source=SignalSource.RULE_BASED,
            )

        return CandidateSignal(
            signal_type=SignalType.HOLD,
            confidence=0.60,
            price_target=price * 1.05,
            stop_loss=price * 0.95,
            reasoning=(
                f"Price action is consolidating ({change:+.2f}%). Wait for clearer "
                "directional signals before entering new positions."
            ),
            source=SignalSource.RULE_BASED,
        )
