"""Store wishlist router."""

from fastapi import APIRouter, Depends
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    CountResponse,
    LineRequest,
    MessageResponse,
    WishlistAddRequest,
    WishlistLineResponse,
)
from services.store_service.services.lines import WishlistLines
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


def get_wishlist_lines(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
) -> WishlistLines:
    return WishlistLines(db, current_user.customer_id)


@router.get("", response_model=list[WishlistLineResponse])
async def list_wishlist(lines: WishlistLines = Depends(get_wishlist_lines)):
    return await lines.list()


@router.post("/add", response_model=MessageResponse)
async def add_to_wishlist(
    body: WishlistAddRequest, lines: WishlistLines = Depends(get_wishlist_lines)
):
    """Add a product. Returns 409 if it is already on the wishlist."""
    message = await lines.add(body.product_id, body.quantity, body.priority)
    return MessageResponse(message=message)


@router.post("/remove", response_model=MessageResponse)
async def remove_from_wishlist(
    body: LineRequest, lines: WishlistLines = Depends(get_wishlist_lines)
):
    return MessageResponse(message=await lines.remove(body.product_id))


@router.post("/increment", response_model=MessageResponse)
async def increment_wishlist_line(
    body: LineRequest, lines: WishlistLines = Depends(get_wishlist_lines)
):
    return MessageResponse(message=await lines.increment(body.product_id))


@router.post("/decrement", response_model=MessageResponse)
async def decrement_wishlist_line(
    body: LineRequest, lines: WishlistLines = Depends(get_wishlist_lines)
):
    return MessageResponse(message=await lines.decrement(body.product_id))


@router.get("/count", response_model=CountResponse)
async def count_wishlist(lines: WishlistLines = Depends(get_wishlist_lines)):
    """Number of products on the wishlist."""
    return CountResponse(count=await lines.count())
