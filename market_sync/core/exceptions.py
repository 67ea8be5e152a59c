"""
Error taxonomy for the sync pipeline and signal endpoints.

Every error carries its HTTP status, a stable ``error_type`` string and
whether the caller may retry the same request later:

- 400 ValidationError: bad symbol, user id, quantity or price, never retried
- 401 AuthenticationError: wrong scheduler secret
- 404 NotFoundError / InstrumentNotFoundError: no market data yet,
  retryable after the next synchronization pass
- 404 PortfolioNotFoundError: user has no portfolio, not retryable
- 429 RateLimitError: per-user budget spent, retry after ``retry_after``
- 500 DatabaseError / PersistenceError / ConfigurationError
- 503 ExternalServiceError: advisory service unusable; absorbed into
  fallback results by the signal and insight services

Usage:
    raise InstrumentNotFoundError("Market data not available for AAPL", symbol="AAPL")
    raise RateLimitError("Rate limit exceeded", retry_after=3600)
"""

from typing import Any


class AppError(Exception):
    """
    Root of the taxonomy. The API layer maps any subclass to a JSON
    error response using ``status_code`` and ``error_type``.
    """

    status_code: int = 500
    error_type: str = "internal_error"
    retryable: bool = False

    def __init__(self, message: str, **context: Any):
        """
        Args:
            message: Caller-facing description (sanitized before it leaves the API)
            **context: Structured fields for the log event (symbol, user_id, ...)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Flatten into a structured log payload."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "status_code": self.status_code,
            "retryable": self.retryable,
            **self.context,
        }


# ===== 4xx: caller-side =====


class ValidationError(AppError):
    """Malformed symbol, user id, quantity, price or request body."""

    status_code = 400
    error_type = "validation_error"


class AuthenticationError(AppError):
    """Missing or wrong X-Admin-Secret on the sync trigger."""

    status_code = 401
    error_type = "authentication_error"


class NotFoundError(AppError):
    """A record the operation needs is absent."""

    status_code = 404
    error_type = "not_found_error"
    retryable = True


class InstrumentNotFoundError(NotFoundError):
    """No market data stored for ``symbol``."""

    error_type = "instrument_not_found"

    def __init__(self, message: str, symbol: str, **context: Any):
        super().__init__(message, symbol=symbol, **context)
        self.symbol = symbol


class PortfolioNotFoundError(NotFoundError):
    """The user has no portfolio to read or add holdings to."""

    error_type = "portfolio_not_found"
    retryable = False


class RateLimitError(AppError):
    """Per-user request budget exhausted for the current window."""

    status_code = 429
    error_type = "rate_limit_error"
    retryable = True

    def __init__(self, message: str, retry_after: int, **context: Any):
        """
        Args:
            message: Caller-facing description
            retry_after: Seconds until the window resets
            **context: Limit parameters for the log event
        """
        super().__init__(message, retry_after=retry_after, **context)
        self.retry_after = retry_after


# ===== 5xx: service-side =====


class DatabaseError(AppError):
    """MongoDB unreachable or a query failed."""

    status_code = 500
    error_type = "database_error"


class PersistenceError(DatabaseError):
    """A write did not reach the store. Fatal for the current operation."""

    error_type = "persistence_error"


class ConfigurationError(AppError):
    """Bad settings (e.g. MONGODB_URL without a database); raised at startup."""

    status_code = 500
    error_type = "configuration_error"


class ExternalServiceError(AppError):
    """
    The advisory service timed out, failed or replied with nothing usable.
    """

    status_code = 503
    error_type = "external_service_error"
    retryable = True

    def __init__(self, message: str, service: str, **context: Any):
        """
        Args:
            message: What went wrong
            service: Service identifier (e.g. "dashscope")
            **context: Model name, original exception type
        """
        super().__init__(message, service=service, **context)
        self.service = service
