"""
Request input validation.

Runs before any external call or state change; failures raise
ValidationError (400).
"""

import math
import re

from ..core.exceptions import ValidationError

_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9]{1,10}$")
_USER_ID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

VALID_TIMEFRAMES = ("1D", "1W", "1M", "3M", "6M", "1Y")
DEFAULT_TIMEFRAME = "1D"

MAX_QUANTITY = 1_000_000
MAX_AVERAGE_COST = 100_000


def validate_symbol(symbol: object) -> str:
    """
    Normalize and validate a ticker symbol.

    Examples:
        >>> validate_symbol(" aapl ")
        'AAPL'
    """
    if not symbol or not isinstance(symbol, str):
        raise ValidationError("Invalid symbol: Symbol is required and must be a string")

    clean_symbol = symbol.strip().upper()

    if not _SYMBOL_PATTERN.fullmatch(clean_symbol):
        raise ValidationError(
            "Invalid symbol: Must be 1-10 alphanumeric characters",
            symbol=clean_symbol[:20],
        )

    return clean_symbol


def validate_user_id(user_id: object) -> str:
    """Validate a UUID-formatted user id and return its canonical lower-case form."""
    if not user_id or not isinstance(user_id, str):
        raise ValidationError("Invalid user ID: User ID is required")

    if not _USER_ID_PATTERN.fullmatch(user_id):
        raise ValidationError("Invalid user ID format")

    return user_id.lower()


def validate_timeframe(timeframe: object) -> str:
    """Normalize a chart timeframe. Unknown values fall back to 1D."""
    if not isinstance(timeframe, str) or not timeframe.strip():
        return DEFAULT_TIMEFRAME

    clean_timeframe = timeframe.strip().upper()
    if clean_timeframe not in VALID_TIMEFRAMES:
        return DEFAULT_TIMEFRAME

    return clean_timeframe


def _parse_positive_number(value: object, label: str) -> float:
    # Numeric strings are accepted the way form inputs submit them
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        raise ValidationError(f"{label} must be a positive number")

    try:
        number = float(value)
    except ValueError:
        raise ValidationError(f"{label} must be a positive number") from None

    if not math.isfinite(number) or number <= 0:
        raise ValidationError(f"{label} must be a positive number")

    return number


def validate_quantity(quantity: object) -> float:
    """
    Validate a share quantity in (0, 1,000,000].

    Examples:
        >>> validate_quantity("12.5")
        12.5
    """
    number = _parse_positive_number(quantity, "Quantity")
    if number > MAX_QUANTITY:
        raise ValidationError("Quantity cannot exceed 1,000,000 shares", quantity=number)
    return number


def validate_average_cost(average_cost: object) -> float:
    """Validate a per-share purchase price in (0, 100,000]."""
    number = _parse_positive_number(average_cost, "Price")
    if number > MAX_AVERAGE_COST:
        raise ValidationError("Price cannot exceed $100,000 per share", average_cost=number)
    return number
