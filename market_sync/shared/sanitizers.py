"""
Shared sanitization utilities.

Masks credentials and personal data before error messages reach logs
or callers.
"""

import re

# Pre-compiled regex patterns for performance
_API_KEY_PATTERN = re.compile(r"(apikey[=:]\s*)([A-Za-z0-9_-]+)", re.IGNORECASE)
_BEARER_TOKEN_PATTERN = re.compile(r"(Bearer\s+)([A-Za-z0-9._-]+)", re.IGNORECASE)
_EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_LONG_NUMBER_PATTERN = re.compile(r"\b\d{4,}\b")

# Keywords that indicate sensitive content
_SENSITIVE_KEYWORDS = frozenset({"apikey", "api_key", "bearer", "token", "secret"})

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


def sanitize_text(text: str, mask: str = "****") -> str:
    """
    Remove API keys and bearer tokens from text.

    Examples:
        >>> sanitize_text("Error: Invalid apikey=ABC123DEF")
        'Error: Invalid apikey=****'
    """
    if not text:
        return text

    text_lower = text.lower()
    if not any(keyword in text_lower for keyword in _SENSITIVE_KEYWORDS):
        return text

    result = _API_KEY_PATTERN.sub(rf"\1{mask}", text)
    return _BEARER_TOKEN_PATTERN.sub(rf"\1{mask}", result)


def sanitize_error_message(message: str | None) -> str:
    """
    Make an error message safe to return to API callers.

    Masks credentials, e-mail addresses and runs of 4+ digits.

    Examples:
        >>> sanitize_error_message("User bob@example.com hit limit 3600")
        'User [email] hit limit [number]'
    """
    if not message:
        return GENERIC_ERROR_MESSAGE

    result = sanitize_text(message)
    result = _EMAIL_PATTERN.sub("[email]", result)
    return _LONG_NUMBER_PATTERN.sub("[number]", result)
