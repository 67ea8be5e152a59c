"""
Insight model returned by the read-only insight fetch.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class Insight(BaseModel):
    """One piece of market commentary."""

    type: str = Field(..., description="Insight category (e.g., Technical Analysis)")
    message: str
    confidence: float = Field(..., ge=0, le=1)
    timestamp: datetime
