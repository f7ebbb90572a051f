"""Checkout orchestration.

A checkout is priced first (tax lookup and totals), then written as an
ordered list of named steps inside a single transaction:

    lock cart -> insert order -> insert tax info -> insert shipping
    -> insert tracking info -> update shipping with tracking ID
    -> insert payment -> update order with payment ID
    -> insert order items -> clear cart -> commit

The first failing step rolls the whole unit back. Once the unit has
committed, post-commit hooks (loyalty accrual) run with their own sessions
and their failures are only logged.
"""

import asyncio
import time
import weakref
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Awaitable, Callable, Optional, Sequence

from fastapi import HTTPException
from libs.common.config import Settings, get_settings
from libs.common.datetime_utils import days_from_now, utc_now
from libs.common.errors import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from libs.common.logging import get_logger
from libs.db.config import Database
from services.store_service.models import (
    CartItem,
    Customer,
    Order,
    OrderItem,
    OrderStatus,
    Payment,
    PaymentStatus,
    Shipping,
    ShippingStatus,
    Tax,
    TrackingInfo,
    TrackingStatus,
    payment_method_label,
)
from services.store_service.services.tax import (
    OrderTotals,
    TaxRate,
    compute_totals,
    resolve_tax_rates,
)
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

CHECKOUT_MESSAGE = "Order, shipping, payment, and tax placed successfully!"

# One lock per customer with a checkout in flight in this process
_customer_locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = (
    weakref.WeakValueDictionary()
)


def _customer_lock(customer_id: int) -> asyncio.Lock:
    lock = _customer_locks.get(customer_id)
    if lock is None:
        lock = asyncio.Lock()
        _customer_locks[customer_id] = lock
    return lock


@dataclass
class CheckoutLine:
    product_id: int
    price: Decimal
    quantity: int


@dataclass
class CheckoutRequest:
    customer_id: int
    lines: list[CheckoutLine]
    address: str
    payment_method: str
    transaction_id: Optional[str] = None


@dataclass
class CheckoutResult:
    order_id: int
    customer_id: int
    tracking_number: int
    total_tax: Decimal
    total_amount: Decimal
    loyalty_points: int
    message: str = CHECKOUT_MESSAGE


@dataclass
class _UnitState:
    """Rows produced by earlier steps and read by later ones."""

    request: CheckoutRequest
    totals: OrderTotals
    rates: dict[int, TaxRate]
    transaction_id: str
    order: Optional[Order] = None
    shipping: Optional[Shipping] = None
    tracking: Optional[TrackingInfo] = None
    payment: Optional[Payment] = None
    items: list[OrderItem] = field(default_factory=list)


PostCommitHook = Callable[[Database, CheckoutResult], Awaitable[None]]


def default_transaction_id() -> str:
    return f"txn_{int(time.time() * 1000)}"


class CheckoutOrchestrator:
    """Prices a checkout and writes it atomically."""

    def __init__(
        self,
        db: AsyncSession,
        *,
        tax_enabled: bool = True,
        points_per_unit: int = 10,
        delivery_days: int = 7,
        verify_snapshot: bool = True,
    ):
        self.db = db
        self.tax_enabled = tax_enabled
        self.points_per_unit = points_per_unit
        self.delivery_days = delivery_days
        self.verify_snapshot = verify_snapshot
        self.steps: list[tuple[str, Callable[[_UnitState], Awaitable[None]]]] = [
            ("lock cart", self._lock_cart),
            ("insert order", self._insert_order),
            ("insert tax info", self._insert_tax_info),
            ("insert shipping", self._insert_shipping),
            ("insert tracking info", self._insert_tracking),
            ("update shipping with tracking ID", self._link_tracking),
            ("insert payment", self._insert_payment),
            ("update order with payment ID", self._link_payment),
            ("insert order items", self._insert_order_items),
            ("clear cart", self._clear_cart),
            ("commit", self._commit),
        ]

    @classmethod
    def from_settings(
        cls, db: AsyncSession, settings: Optional[Settings] = None
    ) -> "CheckoutOrchestrator":
        settings = settings or get_settings()
        return cls(
            db,
            tax_enabled=settings.TAX_ENABLED,
            points_per_unit=settings.LOYALTY_POINTS_PER_CURRENCY_UNIT,
            delivery_days=settings.DELIVERY_ESTIMATE_DAYS,
            verify_snapshot=settings.CHECKOUT_VERIFY_CART_SNAPSHOT,
        )

    async def checkout(self, request: CheckoutRequest) -> CheckoutResult:
        if not request.lines:
            raise ValidationError("Cart items are required")
        if not request.address or not request.address.strip():
            raise ValidationError("Shipping address is required")
        if not request.payment_method:
            raise ValidationError("Payment method is required")

        rates = await resolve_tax_rates(
            self.db,
            (line.product_id for line in request.lines),
            enabled=self.tax_enabled,
        )
        totals = compute_totals(
            request.lines, rates, points_per_unit=self.points_per_unit
        )
        state = _UnitState(
            request=request,
            totals=totals,
            rates=rates,
            transaction_id=request.transaction_id or default_transaction_id(),
        )

        # Row locks serialise checkouts across workers; within a worker the
        # customer lock also covers databases that ignore FOR UPDATE
        async with _customer_lock(request.customer_id):
            await self._run_unit(state)

        logger.info(
            "Order %s placed for customer %s (total=%s, tax=%s, points=%d)",
            state.order.id,
            request.customer_id,
            totals.total_amount,
            totals.total_tax,
            totals.loyalty_points,
        )
        return CheckoutResult(
            order_id=state.order.id,
            customer_id=request.customer_id,
            tracking_number=state.tracking.id,
            total_tax=totals.total_tax,
            total_amount=totals.total_amount,
            loyalty_points=totals.loyalty_points,
        )

    async def _run_unit(self, state: _UnitState) -> None:
        for name, step in self.steps:
            try:
                await step(state)
            except HTTPException:
                await self.db.rollback()
                raise
            except SQLAlchemyError as exc:
                await self.db.rollback()
                logger.error(
                    "Checkout for customer %s failed at step '%s': %s",
                    state.request.customer_id,
                    name,
                    exc,
                    exc_info=True,
                )
                raise PersistenceError(name) from exc

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def _lock_cart(self, state: _UnitState) -> None:
        customer_id = state.request.customer_id
        customer = (
            await self.db.execute(
                select(Customer).where(Customer.id == customer_id).with_for_update()
            )
        ).scalar_one_or_none()
        if customer is None:
            raise NotFoundError("Customer not found")

        cart_lines = (
            (
                await self.db.execute(
                    select(CartItem)
                    .where(CartItem.customer_id == customer_id)
                    .with_for_update()
                )
            )
            .scalars()
            .all()
        )
        if not self.verify_snapshot:
            return

        submitted: dict[int, int] = {}
        for line in state.request.lines:
            submitted[line.product_id] = submitted.get(line.product_id, 0) + line.quantity
        persisted = {line.product_id: line.quantity for line in cart_lines}
        if submitted != persisted:
            logger.info(
                "Cart snapshot mismatch for customer %s (submitted=%s, persisted=%s)",
                customer_id,
                submitted,
                persisted,
            )
            raise ConflictError("Cart has changed")

    async def _insert_order(self, state: _UnitState) -> None:
        order = Order(
            customer_id=state.request.customer_id,
            total_amount=state.totals.total_amount,
            order_date=utc_now(),
            status=OrderStatus.PROCESSING,
        )
        self.db.add(order)
        await self.db.flush()
        state.order = order

    async def _insert_tax_info(self, state: _UnitState) -> None:
        if not state.totals.line_taxes:
            return
        for index in state.totals.line_taxes:
            line = state.request.lines[index]
            rate = state.rates[line.product_id]
            self.db.add(
                Tax(
                    product_id=line.product_id,
                    tax_rate=rate.rate,
                    tax_type=rate.tax_type,
                )
            )
        await self.db.flush()

    async def _insert_shipping(self, state: _UnitState) -> None:
        shipping = Shipping(
            order_id=state.order.id,
            address=state.request.address,
            status=ShippingStatus.PROCESSING,
        )
        self.db.add(shipping)
        await self.db.flush()
        state.shipping = shipping

    async def _insert_tracking(self, state: _UnitState) -> None:
        tracking = TrackingInfo(
            order_id=state.order.id,
            status=TrackingStatus.IN_TRANSIT,
            estimated_delivery=days_from_now(self.delivery_days),
        )
        self.db.add(tracking)
        await self.db.flush()
        state.tracking = tracking

    async def _link_tracking(self, state: _UnitState) -> None:
        state.shipping.tracking_id = state.tracking.id
        await self.db.flush()

    async def _insert_payment(self, state: _UnitState) -> None:
        payment = Payment(
            order_id=state.order.id,
            amount=state.totals.total_amount,
            payment_method=payment_method_label(state.request.payment_method),
            payment_status=PaymentStatus.PENDING,
            transaction_id=state.transaction_id,
        )
        self.db.add(payment)
        await self.db.flush()
        state.payment = payment

    async def _link_payment(self, state: _UnitState) -> None:
        state.order.payment_id = state.payment.id
        await self.db.flush()

    async def _insert_order_items(self, state: _UnitState) -> None:
        items = [
            OrderItem(
                order_id=state.order.id,
                product_id=line.product_id,
                quantity=line.quantity,
                subtotal=subtotal,
            )
            for line, subtotal in zip(state.request.lines, state.totals.subtotals)
        ]
        self.db.add_all(items)
        await self.db.flush()
        state.items = items

    async def _clear_cart(self, state: _UnitState) -> None:
        await self.db.execute(
            delete(CartItem).where(CartItem.customer_id == state.request.customer_id)
        )

    async def _commit(self, state: _UnitState) -> None:
        await self.db.commit()


async def run_post_commit_hooks(
    database: Database,
    result: CheckoutResult,
    hooks: Sequence[PostCommitHook],
) -> None:
    """Run each hook after the order has committed. Failures are logged only."""
    for hook in hooks:
        name = getattr(hook, "name", getattr(hook, "__name__", repr(hook)))
        try:
            await hook(database, result)
        except Exception:
            logger.exception(
                "Post-commit hook '%s' failed for order %s", name, result.order_id
            )
