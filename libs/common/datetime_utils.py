"""Timezone-aware UTC timestamps for model defaults and computed dates.

Usage:
    from libs.common.datetime_utils import utc_now

    order_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Current time as an aware UTC datetime. Use for every stored timestamp."""
    return datetime.now(timezone.utc)


def days_from_now(days: int) -> datetime:
    """Aware UTC datetime ``days`` days ahead, e.g. an estimated delivery date."""
    return utc_now() + timedelta(days=days)
