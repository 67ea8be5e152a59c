"""
Portfolio endpoints.

- GET /api/portfolios/{user_id}: portfolio with its holdings
- POST /api/portfolios/{user_id}/holdings: add a position
"""

import structlog
from fastapi import APIRouter, Depends, Request, status

from ..models.portfolio import PortfolioSnapshot
from ..services.portfolio_service import PortfolioService
from .dependencies.rate_limit import limiter
from .dependencies.services import get_portfolio_service
from .schemas.portfolio_models import AddHoldingRequest, HoldingResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/api/portfolios", tags=["portfolios"])


@router.get("/{user_id}", response_model=PortfolioSnapshot)
@limiter.limit("60/minute")
async def get_portfolio(
    request: Request,
    user_id: str,
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioSnapshot:
    """Get a user's portfolio and holdings. 400 bad user id, 404 no portfolio."""
    return await portfolio_service.get_portfolio(user_id)


@router.post(
    "/{user_id}/holdings",
    response_model=HoldingResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("30/minute")
async def add_holding(
    request: Request,
    user_id: str,
    body: AddHoldingRequest,
    portfolio_service: PortfolioService = Depends(get_portfolio_service),
) -> HoldingResponse:
    """
    Add a holding to the user's portfolio.

    Errors: 400 invalid input, 404 no portfolio, 500 storage failure.
    The portfolio totals are refreshed by the next synchronization pass.
    """
    holding = await portfolio_service.add_holding(
        user_id, body.symbol, body.quantity, body.average_cost
    )
    logger.info("Holding added", user_id=holding.user_id, symbol=holding.symbol)
    return HoldingResponse(holding=holding)
