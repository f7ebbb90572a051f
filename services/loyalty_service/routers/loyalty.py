"""Loyalty router: point balance, history and redemption."""

from fastapi import APIRouter, Depends
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.loyalty_service.schemas import (
    LoyaltySummaryResponse,
    RedeemRequest,
    RedeemResponse,
)
from services.loyalty_service.services.loyalty_ops import (
    get_loyalty_summary,
    redeem_points,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/loyalty", tags=["loyalty"])


@router.get("/points", response_model=LoyaltySummaryResponse)
async def get_points(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Current balance and history, newest first."""
    return await get_loyalty_summary(db, current_user.customer_id)


@router.post("/redeem", response_model=RedeemResponse)
async def redeem(
    body: RedeemRequest,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    discount = await redeem_points(db, current_user.customer_id, body.points)
    return RedeemResponse(success=True, discount=discount)
