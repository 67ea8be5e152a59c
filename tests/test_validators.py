"""
Tests for request input validators.
"""

import pytest

from market_sync.core.exceptions import ValidationError
from market_sync.shared.validators import (
    validate_average_cost,
    validate_quantity,
    validate_symbol,
    validate_timeframe,
    validate_user_id,
)


class TestValidateSymbol:
    """Test validate_symbol."""

    @pytest.mark.parametrize(
        "raw,expected",
        [("AAPL", "AAPL"), (" aapl ", "AAPL"), ("brk1", "BRK1"), ("A", "A"), ("ABCDEFGHIJ", "ABCDEFGHIJ")],
    )
    def test_valid(self, raw, expected):
        assert validate_symbol(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "ABCDEFGHIJK", "BRK.B", "AA PL", "$AAPL", None, 123])
    def test_invalid(self, raw):
        with pytest.raises(ValidationError, match="Invalid symbol"):
            validate_symbol(raw)


class TestValidateUserId:
    """Test validate_user_id."""

    @pytest.mark.parametrize(
        "raw",
        [
            "5f0c8a34-2d7e-4f5b-9a51-0f3a2b7c9d11",
            "5F0C8A34-2D7E-4F5B-9A51-0F3A2B7C9D11",
            "5f0C8a34-2D7e-4f5B-9a51-0F3a2b7C9d11",
        ],
    )
    def test_valid_returns_lower_case(self, raw):
        assert validate_user_id(raw) == "5f0c8a34-2d7e-4f5b-9a51-0f3a2b7c9d11"

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            None,
            "user_123",
            "5f0c8a34-2d7e-4f5b-9a51-0f3a2b7c9d1",
            "5f0c8a34-2d7e-4f5b-9a51-0f3a2b7c9d11x",
            "zf0c8a34-2d7e-4f5b-9a51-0f3a2b7c9d11",
            "5f0c8a34-2d7e-4f5b-9a51-0f3a2b7c9d11\n",
            " 5f0c8a34-2d7e-4f5b-9a51-0f3a2b7c9d11",
            "5f0c8a34-2d7e-4f5b-9a51-0f3a2b7c9d11 ",
        ],
    )
    def test_invalid(self, raw):
        with pytest.raises(ValidationError, match="Invalid user ID"):
            validate_user_id(raw)


class TestValidateTimeframe:
    """Test validate_timeframe."""

    @pytest.mark.parametrize("raw,expected", [("1D", "1D"), ("1w", "1W"), (" 3M ", "3M"), ("1Y", "1Y")])
    def test_known(self, raw, expected):
        assert validate_timeframe(raw) == expected

    @pytest.mark.parametrize("raw", ["5D", "", None, "weekly", 7])
    def test_unknown_falls_back(self, raw):
        assert validate_timeframe(raw) == "1D"


class TestValidateQuantity:
    """Test validate_quantity."""

    @pytest.mark.parametrize(
        "raw,expected",
        [(1, 1.0), (0.5, 0.5), ("12.5", 12.5), (" 3 ", 3.0), (1_000_000, 1_000_000.0)],
    )
    def test_valid(self, raw, expected):
        assert validate_quantity(raw) == expected

    @pytest.mark.parametrize("raw", [0, -1, "0", "abc", "", None, True, "nan", "inf", [5]])
    def test_not_positive_number(self, raw):
        with pytest.raises(ValidationError, match="Quantity must be a positive number"):
            validate_quantity(raw)

    def test_above_maximum(self):
        with pytest.raises(ValidationError, match="cannot exceed 1,000,000 shares"):
            validate_quantity(1_000_000.01)


class TestValidateAverageCost:
    """Test validate_average_cost."""

    @pytest.mark.parametrize("raw,expected", [(150.25, 150.25), ("0.01", 0.01), (100_000, 100_000.0)])
    def test_valid(self, raw, expected):
        assert validate_average_cost(raw) == expected

    @pytest.mark.parametrize("raw", [0, -10.0, "free", None, False, "-inf"])
    def test_not_positive_number(self, raw):
        with pytest.raises(ValidationError, match="Price must be a positive number"):
            validate_average_cost(raw)

    def test_above_maximum(self):
        with pytest.raises(ValidationError, match=r"cannot exceed \$100,000 per share"):
            validate_average_cost("100000.5")
