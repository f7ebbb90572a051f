"""Store Service models package."""

from services.store_service.models.after_sales import (
    ExchangeRequest,
    ReturnRequest,
    SupportMessage,
)
from services.store_service.models.catalog import Customer, Discount, Product
from services.store_service.models.commerce import (
    CartItem,
    Order,
    OrderItem,
    Payment,
    Shipping,
    Tax,
    TrackingInfo,
    WishlistItem,
)
from services.store_service.models.enums import (
    OrderStatus,
    PaymentStatus,
    RequestStatus,
    ShippingStatus,
    TrackingStatus,
    payment_method_label,
)

__all__ = [
    # Catalog
    "Customer",
    "Discount",
    "Product",
    # Commerce
    "CartItem",
    "Order",
    "OrderItem",
    "Payment",
    "Shipping",
    "Tax",
    "TrackingInfo",
    "WishlistItem",
    # After-sales
    "ExchangeRequest",
    "ReturnRequest",
    "SupportMessage",
    # Enums
    "OrderStatus",
    "PaymentStatus",
    "RequestStatus",
    "ShippingStatus",
    "TrackingStatus",
    "payment_method_label",
]
