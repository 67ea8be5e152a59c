"""
Core utility functions.
"""

from .date_utils import expires_after, utcnow

__all__ = ["expires_after", "utcnow"]
