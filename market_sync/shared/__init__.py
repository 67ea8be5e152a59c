"""
Shared utilities for input validation and output sanitization.
"""

from .sanitizers import sanitize_error_message, sanitize_text
from .validators import validate_symbol, validate_timeframe, validate_user_id

__all__ = [
    "sanitize_error_message",
    "sanitize_text",
    "validate_symbol",
    "validate_timeframe",
    "validate_user_id",
]
