"""Loyalty point operations: accrual, redemption and the balance/history summary.

The balance row and its history entry are always written in the same
transaction, with the balance row locked, so the balance stays equal to the
sum of the customer's history deltas.
"""

from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.common.errors import ValidationError
from libs.common.logging import get_logger
from libs.db.config import Database
from services.loyalty_service.models import LoyaltyPoints, PointsHistory
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Redemption tiers
# ---------------------------------------------------------------------------
REDEMPTION_TIERS = {
    100: 1,
    500: 5,
    1000: 12,
}

ACCRUAL_DESCRIPTION = "Points earned from order"
REDEMPTION_DESCRIPTION = "Redeemed for discount"


def discount_for_points(points: int) -> int:
    """Discount granted for redeeming exactly ``points``. Off-tier amounts give 0."""
    return REDEMPTION_TIERS.get(points, 0)


async def _locked_balance(
    db: AsyncSession, customer_id: int
) -> Optional[LoyaltyPoints]:
    result = await db.execute(
        select(LoyaltyPoints)
        .where(LoyaltyPoints.customer_id == customer_id)
        .with_for_update()
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Accrual
# ---------------------------------------------------------------------------


async def accrue_points(
    db: AsyncSession,
    customer_id: int,
    points: int,
    description: str = ACCRUAL_DESCRIPTION,
) -> LoyaltyPoints:
    """Add ``points`` to the customer's balance and record the history entry.

    A first-time insert that collides with a concurrent insert for the same
    customer is retried once as an update of the row that won.
    """
    if points <= 0:
        raise ValidationError("Points must be positive")

    balance = await _locked_balance(db, customer_id)
    if balance is None:
        balance = LoyaltyPoints(customer_id=customer_id, points=points)
        db.add(balance)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            logger.info(
                "Loyalty balance for customer %s created concurrently, retrying as update",
                customer_id,
            )
            balance = await _locked_balance(db, customer_id)
            if balance is None:
                raise
            balance.points += points
            balance.updated_at = utc_now()
    else:
        balance.points += points
        balance.updated_at = utc_now()

    db.add(
        PointsHistory(customer_id=customer_id, points=points, description=description)
    )
    await db.commit()

    logger.info(
        "Accrued %d points for customer %s (balance=%d)",
        points,
        customer_id,
        balance.points,
    )
    return balance


# ---------------------------------------------------------------------------
# Redemption
# ---------------------------------------------------------------------------


async def redeem_points(db: AsyncSession, customer_id: int, points: int) -> int:
    """Spend ``points`` and return the discount for that tier.

    Raises ``ValidationError`` and leaves the balance untouched when the
    customer has no balance or not enough points.
    """
    if points <= 0:
        raise ValidationError("Points must be positive")

    balance = await _locked_balance(db, customer_id)
    if balance is None or balance.points < points:
        await db.rollback()
        raise ValidationError("Not enough points")

    balance.points -= points
    balance.updated_at = utc_now()
    db.add(
        PointsHistory(
            customer_id=customer_id,
            points=-points,
            description=REDEMPTION_DESCRIPTION,
        )
    )
    await db.commit()

    discount = discount_for_points(points)
    logger.info(
        "Customer %s redeemed %d points for a %d%% discount (balance=%d)",
        customer_id,
        points,
        discount,
        balance.points,
    )
    return discount


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


async def get_loyalty_summary(db: AsyncSession, customer_id: int) -> dict:
    """Current balance (0 without a balance row) and history, newest first."""
    balance = (
        await db.execute(
            select(LoyaltyPoints.points).where(
                LoyaltyPoints.customer_id == customer_id
            )
        )
    ).scalar_one_or_none()

    history = (
        (
            await db.execute(
                select(PointsHistory)
                .where(PointsHistory.customer_id == customer_id)
                .order_by(PointsHistory.date.desc(), PointsHistory.id.desc())
            )
        )
        .scalars()
        .all()
    )
    return {"points": balance or 0, "history": list(history)}


# ---------------------------------------------------------------------------
# Checkout hook
# ---------------------------------------------------------------------------


class LoyaltyAccrualHook:
    """Post-commit checkout hook crediting the points earned by an order.

    Runs in its own session so a failure here can never undo a committed order.
    """

    name = "loyalty accrual"

    def __init__(self, description: str = ACCRUAL_DESCRIPTION):
        self.description = description

    async def __call__(self, database: Database, result) -> None:
        if result.loyalty_points <= 0:
            return
        async with database.session() as db:
            await accrue_points(
                db, result.customer_id, result.loyalty_points, self.description
            )
