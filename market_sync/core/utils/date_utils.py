"""
Timezone-aware time helpers.
"""

from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    """
    Return timezone-aware UTC datetime.

    Replaces deprecated datetime.utcnow() which is scheduled for removal.
    """
    return datetime.now(UTC)


def expires_after(start: datetime, hours: int) -> datetime:
    """Return the instant ``hours`` after ``start``."""
    return start + timedelta(hours=hours)
