"""Store after-sales router: return and exchange requests."""

from fastapi import APIRouter, Depends
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.errors import ConflictError, NotFoundError, ValidationError
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.store_service.models import (
    ExchangeRequest,
    Order,
    OrderItem,
    Product,
    RequestStatus,
    ReturnRequest,
)
from services.store_service.schemas import (
    ExchangeRequestBody,
    ExchangeRequestResponse,
    MessageResponse,
    ReturnRequestBody,
    ReturnRequestResponse,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(tags=["after-sales"])


async def get_owned_order_item(
    db: AsyncSession, order_item_id: int, customer_id: int
) -> tuple[OrderItem, Order]:
    """Load an order item together with its order, scoped to the customer."""
    row = (
        await db.execute(
            select(OrderItem, Order)
            .join(Order, Order.id == OrderItem.order_id)
            .where(OrderItem.id == order_item_id, Order.customer_id == customer_id)
        )
    ).first()
    if row is None:
        raise NotFoundError("Order item not found")
    return row[0], row[1]


# ============================================================================
# RETURNS
# ============================================================================


@router.post("/return/request", response_model=MessageResponse)
async def request_return(
    body: ReturnRequestBody,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Open a return for one order item. The payment is taken from its order."""
    item, order = await get_owned_order_item(
        db, body.order_item_id, current_user.customer_id
    )
    if order.payment_id is None:
        raise ValidationError("No payment found for this order item")

    existing = (
        await db.execute(
            select(ReturnRequest.id).where(ReturnRequest.order_item_id == item.id)
        )
    ).first()
    if existing:
        raise ConflictError("A return has already been requested for this item")

    db.add(
        ReturnRequest(
            order_item_id=item.id,
            payment_id=order.payment_id,
            reason=body.reason,
            status=RequestStatus.PENDING,
        )
    )
    await db.commit()

    logger.info(
        "Return requested for order item %s by customer %s",
        item.id,
        current_user.customer_id,
    )
    return MessageResponse(message="Return request submitted successfully")


@router.get("/returns", response_model=list[ReturnRequestResponse])
async def list_my_returns(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(
        select(ReturnRequest, OrderItem.product_id, Product.name)
        .join(OrderItem, OrderItem.id == ReturnRequest.order_item_id)
        .join(Order, Order.id == OrderItem.order_id)
        .join(Product, Product.id == OrderItem.product_id)
        .where(Order.customer_id == current_user.customer_id)
        .order_by(ReturnRequest.request_date.desc(), ReturnRequest.id.desc())
    )
    return [
        ReturnRequestResponse(
            id=ret.id,
            order_item_id=ret.order_item_id,
            payment_id=ret.payment_id,
            product_id=product_id,
            product_name=product_name,
            reason=ret.reason,
            status=ret.status,
            request_date=ret.request_date,
        )
        for ret, product_id, product_name in result.all()
    ]


# ============================================================================
# EXCHANGES
# ============================================================================


@router.post("/exchange/request", response_model=MessageResponse)
async def request_exchange(
    body: ExchangeRequestBody,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Ask to swap an ordered item for another product."""
    item, _ = await get_owned_order_item(
        db, body.order_item_id, current_user.customer_id
    )
    if await db.get(Product, body.product_id) is None:
        raise NotFoundError("Product not found")

    db.add(
        ExchangeRequest(
            order_item_id=item.id,
            product_id=body.product_id,
            reason=body.reason,
            status=RequestStatus.PENDING,
        )
    )
    await db.commit()
    return MessageResponse(message="Exchange request submitted successfully")


@router.get("/exchanges", response_model=list[ExchangeRequestResponse])
async def list_my_exchanges(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(
        select(ExchangeRequest, Product.name)
        .join(OrderItem, OrderItem.id == ExchangeRequest.order_item_id)
        .join(Order, Order.id == OrderItem.order_id)
        .join(Product, Product.id == ExchangeRequest.product_id)
        .where(Order.customer_id == current_user.customer_id)
        .order_by(ExchangeRequest.exchange_date.desc(), ExchangeRequest.id.desc())
    )
    return [
        ExchangeRequestResponse(
            id=exchange.id,
            order_item_id=exchange.order_item_id,
            product_id=exchange.product_id,
            product_name=product_name,
            reason=exchange.reason,
            status=exchange.status,
            exchange_date=exchange.exchange_date,
        )
        for exchange, product_name in result.all()
    ]
