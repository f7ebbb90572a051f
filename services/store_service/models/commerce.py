"""Store commerce models: cart and wishlist lines, taxes, orders and their dependents.

Orders and payments reference each other, as do shipping rows and tracking
records. Both cycles are closed by a nullable column that checkout fills in
with a follow-up update once the child row exists.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.store_service.models.enums import (
    OrderStatus,
    PaymentStatus,
    ShippingStatus,
    TrackingStatus,
    enum_values,
)
from sqlalchemy import CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship


def _status_enum(enum_cls, name: str) -> SAEnum:
    return SAEnum(
        enum_cls,
        name=name,
        values_callable=enum_values,
        native_enum=False,
        length=32,
        validate_strings=True,
    )


# ============================================================================
# CART / WISHLIST LINES
# ============================================================================


class CartItem(Base):
    """One product line in a customer's cart."""

    __tablename__ = "cart"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.id", ondelete="CASCADE"), index=True, nullable=False
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    added_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    __table_args__ = (
        UniqueConstraint("customer_id", "product_id", name="uq_cart_customer_product"),
        CheckConstraint("quantity >= 1", name="positive_quantity"),
    )

    def __repr__(self):
        return f"<CartItem customer={self.customer_id} product={self.product_id} qty={self.quantity}>"


class WishlistItem(Base):
    """One product line in a customer's wishlist."""

    __tablename__ = "wishlist"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.id", ondelete="CASCADE"), index=True, nullable=False
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    added_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    __table_args__ = (
        UniqueConstraint(
            "customer_id", "product_id", name="uq_wishlist_customer_product"
        ),
        CheckConstraint("quantity >= 1", name="positive_quantity"),
    )

    def __repr__(self):
        return f"<WishlistItem customer={self.customer_id} product={self.product_id}>"


# ============================================================================
# TAX
# ============================================================================


class Tax(Base):
    """Tax rate per product.

    Append-only: checkout re-inserts the applied rate for every taxed order
    line, so a product can have several rows. The newest row wins on lookup.
    """

    __tablename__ = "tax"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), index=True, nullable=False
    )
    tax_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    tax_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    def __repr__(self):
        return f"<Tax product={self.product_id} rate={self.tax_rate}>"


# ============================================================================
# ORDERS
# ============================================================================


class Order(Base):
    """Customer orders. Created once per checkout."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.id"), index=True, nullable=False
    )
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    order_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    status: Mapped[OrderStatus] = mapped_column(
        _status_enum(OrderStatus, "order_status_enum"),
        default=OrderStatus.PROCESSING,
        nullable=False,
    )
    # Filled in after the payment row exists
    payment_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("payments.id", use_alter=True), nullable=True
    )

    items = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Order {self.id} total={self.total_amount}>"


class OrderItem(Base):
    """Line items of an order. Subtotal is price x quantity at checkout time."""

    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id", ondelete="CASCADE"), index=True, nullable=False
    )
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    __table_args__ = (CheckConstraint("quantity >= 1", name="positive_quantity"),)

    order = relationship("Order", back_populates="items")

    def __repr__(self):
        return f"<OrderItem order={self.order_id} product={self.product_id} qty={self.quantity}>"


class Payment(Base):
    """Recorded payments. Capture happens outside this service."""

    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id"), index=True, nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False)
    payment_status: Mapped[PaymentStatus] = mapped_column(
        _status_enum(PaymentStatus, "payment_status_enum"),
        default=PaymentStatus.PENDING,
        nullable=False,
    )
    transaction_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    def __repr__(self):
        return f"<Payment {self.id} order={self.order_id} {self.payment_status}>"


class TrackingInfo(Base):
    """Delivery tracking record created with every order."""

    __tablename__ = "tracking_info"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id"), index=True, nullable=False
    )
    status: Mapped[TrackingStatus] = mapped_column(
        _status_enum(TrackingStatus, "tracking_status_enum"),
        default=TrackingStatus.IN_TRANSIT,
        nullable=False,
    )
    estimated_delivery: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    def __repr__(self):
        return f"<TrackingInfo {self.id} order={self.order_id}>"


class Shipping(Base):
    """Shipping address and status for an order."""

    __tablename__ = "shipping"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id"), index=True, nullable=False
    )
    address: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[ShippingStatus] = mapped_column(
        _status_enum(ShippingStatus, "shipping_status_enum"),
        default=ShippingStatus.PROCESSING,
        nullable=False,
    )
    # Filled in after the tracking record exists
    tracking_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("tracking_info.id"), nullable=True
    )

    def __repr__(self):
        return f"<Shipping {self.id} order={self.order_id}>"
