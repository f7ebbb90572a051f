"""Pydantic schemas for store service.

Bodies and responses use camelCase keys on the wire; money is returned as
plain JSON numbers.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from services.store_service.models import (
    OrderStatus,
    PaymentStatus,
    RequestStatus,
    ShippingStatus,
    TrackingStatus,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class MessageResponse(CamelModel):
    message: str


class CountResponse(CamelModel):
    count: int


# ============================================================================
# CART / WISHLIST SCHEMAS
# ============================================================================


class LineRequest(CamelModel):
    product_id: int


class CartAddRequest(LineRequest):
    quantity: int = Field(1, ge=1)


class WishlistAddRequest(LineRequest):
    quantity: int = Field(1, ge=1)
    priority: Optional[int] = Field(None, ge=1)


class CartLineResponse(CamelModel):
    product_id: int
    name: str
    price: float
    description: Optional[str] = None
    quantity: int
    added_at: Optional[datetime] = None


class WishlistLineResponse(CartLineResponse):
    priority: int


# ============================================================================
# CHECKOUT SCHEMAS
# ============================================================================


class CheckoutItem(CamelModel):
    product_id: int
    price: Decimal = Field(..., gt=0, decimal_places=2)
    quantity: int = Field(..., ge=1)


class CheckoutRequestBody(CamelModel):
    # Emptiness is checked by the orchestrator so it surfaces as a 400
    items: list[CheckoutItem] = Field(default_factory=list)
    address: Optional[str] = None
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = Field(None, max_length=100)


class CheckoutResponse(CamelModel):
    message: str
    order_id: int
    tracking_number: int
    total_tax: float
    total_amount: float
    loyalty_points: int


# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class OrderItemResponse(CamelModel):
    id: int
    order_id: int
    product_id: int
    product_name: Optional[str] = None
    quantity: int
    subtotal: float
    return_status: Optional[RequestStatus] = None


class PaymentResponse(CamelModel):
    id: int
    amount: float
    payment_method: str
    payment_status: PaymentStatus
    transaction_id: Optional[str] = None


class TrackingResponse(CamelModel):
    id: int
    status: TrackingStatus
    estimated_delivery: datetime


class ShippingResponse(CamelModel):
    id: int
    address: str
    status: ShippingStatus
    tracking_id: Optional[int] = None


class OrderResponse(CamelModel):
    id: int
    total_amount: float
    order_date: datetime
    status: OrderStatus
    payment_id: Optional[int] = None


class OrderDetailResponse(OrderResponse):
    items: list[OrderItemResponse] = []
    payment: Optional[PaymentResponse] = None
    shipping: Optional[ShippingResponse] = None
    tracking: Optional[TrackingResponse] = None


# ============================================================================
# RETURN / EXCHANGE SCHEMAS
# ============================================================================


class ReturnRequestBody(CamelModel):
    order_item_id: int
    reason: str = Field(..., min_length=1)


class ReturnRequestResponse(CamelModel):
    id: int
    order_item_id: int
    payment_id: int
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    reason: str
    status: RequestStatus
    request_date: datetime


class ExchangeRequestBody(CamelModel):
    order_item_id: int
    product_id: int
    reason: str = Field(..., min_length=1)


class ExchangeRequestResponse(CamelModel):
    id: int
    order_item_id: int
    product_id: int
    product_name: Optional[str] = None
    reason: str
    status: RequestStatus
    exchange_date: datetime


# ============================================================================
# SUPPORT / DISCOUNT SCHEMAS
# ============================================================================


class SupportMessageCreate(CamelModel):
    message: str = Field(..., min_length=1)


class SupportMessageCreated(CamelModel):
    message: str
    chat_id: int


class SupportRespondRequest(CamelModel):
    chat_id: int
    response: str = Field(..., min_length=1)


class SupportMessageResponse(CamelModel):
    id: int
    message: str
    response: Optional[str] = None
    timestamp: datetime


class DiscountApplyRequest(CamelModel):
    code: str = Field(..., min_length=1, max_length=50)


class DiscountResponse(CamelModel):
    percent: float
