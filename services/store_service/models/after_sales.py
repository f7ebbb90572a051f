"""After-sales models: return and exchange requests, support chat."""

from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.store_service.models.enums import RequestStatus, enum_values
from sqlalchemy import DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

_request_status = SAEnum(
    RequestStatus,
    name="request_status_enum",
    values_callable=enum_values,
    native_enum=False,
    length=32,
    validate_strings=True,
)


class ReturnRequest(Base):
    """Return request for a single order item.

    ``payment_id`` is resolved from the item's order, never supplied by the caller.
    """

    __tablename__ = "return_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_item_id: Mapped[int] = mapped_column(
        ForeignKey("order_items.id"), index=True, nullable=False
    )
    payment_id: Mapped[int] = mapped_column(ForeignKey("payments.id"), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[RequestStatus] = mapped_column(
        _request_status, default=RequestStatus.PENDING, nullable=False
    )
    request_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    def __repr__(self):
        return f"<ReturnRequest {self.id} item={self.order_item_id} {self.status}>"


class ExchangeRequest(Base):
    """Request to swap an ordered item for another product."""

    __tablename__ = "exchange_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_item_id: Mapped[int] = mapped_column(
        ForeignKey("order_items.id"), index=True, nullable=False
    )
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[RequestStatus] = mapped_column(
        _request_status, default=RequestStatus.PENDING, nullable=False
    )
    exchange_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    def __repr__(self):
        return f"<ExchangeRequest {self.id} item={self.order_item_id} {self.status}>"


class SupportMessage(Base):
    """Customer support chat message and the staff response, if any."""

    __tablename__ = "customer_support"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.id", ondelete="CASCADE"), index=True, nullable=False
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    response: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    def __repr__(self):
        return f"<SupportMessage {self.id} customer={self.customer_id}>"
