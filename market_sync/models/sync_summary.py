"""
Synchronization pass summary.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class SyncSummary(BaseModel):
    """Outcome of one synchronization pass. Failures are counted, not raised."""

    updated_count: int = Field(..., description="Instruments whose price was written")
    failed_symbols: list[str] = Field(default_factory=list)
    holdings_updated: int = 0
    holdings_failed: int = 0
    portfolios_updated: int = 0
    portfolios_failed: int = 0
    timestamp: datetime
