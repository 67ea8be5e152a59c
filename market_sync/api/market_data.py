"""
Market data synchronization endpoint.

Triggered by an external scheduler (CronJob) with the admin secret.
"""

import structlog
from fastapi import APIRouter, Depends, Request

from ..models.sync_summary import SyncSummary
from ..services.market_sync_service import MarketSyncService
from .dependencies.rate_limit import limiter
from .dependencies.services import get_market_sync_service, require_admin_secret

logger = structlog.get_logger()

router = APIRouter(prefix="/api/market-data", tags=["market-data"])


@router.post("/sync", response_model=SyncSummary)
@limiter.limit("10/minute")
async def sync_market_data(
    request: Request,
    _: None = Depends(require_admin_secret),
    sync_service: MarketSyncService = Depends(get_market_sync_service),
) -> SyncSummary:
    """
    Run one synchronization pass.

    Updates every instrument's price, then revalues holdings and
    portfolios. Per-item failures are reported in the summary.
    """
    logger.info("Synchronization pass requested")
    return await sync_service.run_sync_pass()
