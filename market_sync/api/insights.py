"""
Market insight endpoint.

Soft-fail: internal errors come back as 200 with a placeholder insight.
"""

from fastapi import APIRouter, Depends, Request

from ..services.insights_service import InsightsService
from .dependencies.rate_limit import limiter
from .dependencies.services import get_insights_service
from .schemas.signal_models import InsightsRequest, InsightsResponse

router = APIRouter(prefix="/api", tags=["insights"])


@router.post("/insights", response_model=InsightsResponse)
@limiter.limit("60/minute")
async def fetch_insights(
    request: Request,
    body: InsightsRequest,
    insights_service: InsightsService = Depends(get_insights_service),
) -> InsightsResponse:
    """
    Get market insights for a symbol.

    Errors: 400 invalid symbol, 404 no market data. Everything else
    returns a single "System Notice" insight; poll again later.
    """
    insights = await insights_service.fetch_insights(body.symbol, body.timeframe)
    return InsightsResponse(insights=insights)
