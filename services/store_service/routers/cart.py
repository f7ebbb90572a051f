"""Store cart router: cart lines of the authenticated customer."""

from fastapi import APIRouter, Depends
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    CartAddRequest,
    CartLineResponse,
    CountResponse,
    LineRequest,
    MessageResponse,
)
from services.store_service.services.lines import CartLines
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/cart", tags=["cart"])


def get_cart_lines(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
) -> CartLines:
    return CartLines(db, current_user.customer_id)


# ============================================================================
# CART ENDPOINTS
# ============================================================================


@router.get("", response_model=list[CartLineResponse])
async def list_cart(lines: CartLines = Depends(get_cart_lines)):
    """Cart lines with product name, price and description."""
    return await lines.list()


@router.post("/add", response_model=MessageResponse)
async def add_to_cart(
    body: CartAddRequest, lines: CartLines = Depends(get_cart_lines)
):
    """Add a product, or increase its quantity if it is already in the cart."""
    return MessageResponse(message=await lines.add(body.product_id, body.quantity))


@router.post("/remove", response_model=MessageResponse)
async def remove_from_cart(
    body: LineRequest, lines: CartLines = Depends(get_cart_lines)
):
    return MessageResponse(message=await lines.remove(body.product_id))


@router.post("/increment", response_model=MessageResponse)
async def increment_cart_line(
    body: LineRequest, lines: CartLines = Depends(get_cart_lines)
):
    return MessageResponse(message=await lines.increment(body.product_id))


@router.post("/decrement", response_model=MessageResponse)
async def decrement_cart_line(
    body: LineRequest, lines: CartLines = Depends(get_cart_lines)
):
    """Decrease the quantity; a line at quantity 1 is removed."""
    return MessageResponse(message=await lines.decrement(body.product_id))


@router.get("/count", response_model=CountResponse)
async def count_cart(lines: CartLines = Depends(get_cart_lines)):
    """Total quantity across the cart."""
    return CountResponse(count=await lines.count())
