"""Enum definitions for store service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class OrderStatus(str, enum.Enum):
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class ShippingStatus(str, enum.Enum):
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"


class TrackingStatus(str, enum.Enum):
    IN_TRANSIT = "In Transit"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"


class PaymentStatus(str, enum.Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"
    REFUNDED = "Refunded"


class RequestStatus(str, enum.Enum):
    """Lifecycle shared by return and exchange requests."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    COMPLETED = "Completed"


# Client discriminator -> stored payment method label
PAYMENT_METHOD_LABELS = {
    "card": "Credit Card",
    "cod": "COD",
}


def payment_method_label(method: str) -> str:
    """Map a client payment discriminator to its display label.

    Unknown discriminators are stored as sent.
    """
    return PAYMENT_METHOD_LABELS.get(method, method)
