"""Discount code router."""

from fastapi import APIRouter, Depends
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.errors import NotFoundError
from libs.db.session import get_async_db
from services.store_service.models import Discount
from services.store_service.schemas import DiscountApplyRequest, DiscountResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/discount", tags=["discounts"])


@router.post("/apply", response_model=DiscountResponse)
async def apply_discount(
    body: DiscountApplyRequest,
    _user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Look up an active discount code and return its percentage."""
    discount = (
        await db.execute(
            select(Discount).where(
                Discount.code == body.code.strip(), Discount.is_active.is_(True)
            )
        )
    ).scalar_one_or_none()
    if discount is None:
        raise NotFoundError("Invalid or inactive discount code")
    return DiscountResponse(percent=discount.percentage)
