"""
Trading signal generation.

Two interchangeable strategies sit behind SignalStrategy:
- RuleBasedStrategy: momentum thresholds, always available
- AdvisoryStrategy: external advisory service with conservative fallback

SignalGenerator validates, rate-limits, normalizes and persists.
"""

from .advisory import AdvisoryStrategy, fallback_candidate, parse_advisory_reply
from .base import SignalStrategy
from .generator import SignalGenerator, normalize_candidate
from .rule_based import RuleBasedStrategy

__all__ = [
    "AdvisoryStrategy",
    "RuleBasedStrategy",
    "SignalGenerator",
    "SignalStrategy",
    "fallback_candidate",
    "normalize_candidate",
    "parse_advisory_reply",
]
