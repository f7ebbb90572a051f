"""Store orders router: checkout and order history."""

from fastapi import APIRouter, BackgroundTasks, Depends
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.errors import NotFoundError
from libs.db.config import Database, get_database
from libs.db.session import get_async_db
from services.loyalty_service.services.loyalty_ops import LoyaltyAccrualHook
from services.store_service.models import (
    Order,
    OrderItem,
    Payment,
    Product,
    ReturnRequest,
    Shipping,
    TrackingInfo,
)
from services.store_service.schemas import (
    CheckoutRequestBody,
    CheckoutResponse,
    OrderDetailResponse,
    OrderItemResponse,
    OrderResponse,
    PaymentResponse,
    ShippingResponse,
    TrackingResponse,
)
from services.store_service.services.checkout import (
    CheckoutLine,
    CheckoutOrchestrator,
    CheckoutRequest,
    run_post_commit_hooks,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

router = APIRouter(tags=["orders"])

# Run in order after a checkout commits
POST_COMMIT_HOOKS = [LoyaltyAccrualHook()]


# ============================================================================
# CHECKOUT
# ============================================================================


@router.post("/order/checkout", response_model=CheckoutResponse)
async def checkout(
    body: CheckoutRequestBody,
    background_tasks: BackgroundTasks,
    current_user: AuthUser = Depends(get_current_user),
    database: Database = Depends(get_database),
):
    """Place an order for the submitted cart lines.

    Loyalty points are credited in the background once the order has
    committed; the response reports the points earned either way. The
    checkout session is closed before the hooks run so they can take its
    database slot.
    """
    request = CheckoutRequest(
        customer_id=current_user.customer_id,
        lines=[
            CheckoutLine(
                product_id=item.product_id, price=item.price, quantity=item.quantity
            )
            for item in body.items
        ],
        address=body.address,
        payment_method=body.payment_method,
        transaction_id=body.transaction_id,
    )
    async with database.session() as db:
        result = await CheckoutOrchestrator.from_settings(db).checkout(request)

    background_tasks.add_task(
        run_post_commit_hooks, database, result, POST_COMMIT_HOOKS
    )

    return CheckoutResponse(
        message=result.message,
        order_id=result.order_id,
        tracking_number=result.tracking_number,
        total_tax=result.total_tax,
        total_amount=result.total_amount,
        loyalty_points=result.loyalty_points,
    )


# ============================================================================
# ORDER HISTORY
# ============================================================================


@router.get("/orders", response_model=list[OrderResponse])
async def list_my_orders(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Orders of the current customer, newest first."""
    result = await db.execute(
        select(Order)
        .where(Order.customer_id == current_user.customer_id)
        .order_by(Order.order_date.desc(), Order.id.desc())
    )
    return result.scalars().all()


@router.get("/orders/{order_id}", response_model=OrderDetailResponse)
async def get_my_order(
    order_id: int,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Order with its items, payment, shipping and tracking records."""
    order = (
        await db.execute(
            select(Order)
            .where(
                Order.id == order_id,
                Order.customer_id == current_user.customer_id,
            )
            .options(selectinload(Order.items))
        )
    ).scalar_one_or_none()
    if not order:
        raise NotFoundError("Order not found")

    payment = await db.get(Payment, order.payment_id) if order.payment_id else None
    shipping = (
        await db.execute(select(Shipping).where(Shipping.order_id == order.id))
    ).scalar_one_or_none()
    tracking = None
    if shipping and shipping.tracking_id:
        tracking = await db.get(TrackingInfo, shipping.tracking_id)

    return OrderDetailResponse(
        id=order.id,
        total_amount=order.total_amount,
        order_date=order.order_date,
        status=order.status,
        payment_id=order.payment_id,
        items=[OrderItemResponse.model_validate(item) for item in order.items],
        payment=PaymentResponse.model_validate(payment) if payment else None,
        shipping=ShippingResponse.model_validate(shipping) if shipping else None,
        tracking=TrackingResponse.model_validate(tracking) if tracking else None,
    )


@router.get("/order-items", response_model=list[OrderItemResponse])
async def list_my_order_items(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Every item the customer has ordered, with its return status if any."""
    result = await db.execute(
        select(OrderItem, Product.name, ReturnRequest.status)
        .join(Order, Order.id == OrderItem.order_id)
        .join(Product, Product.id == OrderItem.product_id)
        .outerjoin(ReturnRequest, ReturnRequest.order_item_id == OrderItem.id)
        .where(Order.customer_id == current_user.customer_id)
        .order_by(Order.order_date.desc(), OrderItem.id)
    )
    return [
        OrderItemResponse(
            id=item.id,
            order_id=item.order_id,
            product_id=item.product_id,
            product_name=product_name,
            quantity=item.quantity,
            subtotal=item.subtotal,
            return_status=return_status,
        )
        for item, product_name, return_status in result.all()
    ]
