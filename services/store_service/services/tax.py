"""Tax lookup and order total computation."""

from dataclasses import dataclass, field
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Protocol

from libs.common.logging import get_logger
from services.store_service.models import Tax
from sqlalchemy import select
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

CENT = Decimal("0.01")
HUNDRED = Decimal(100)

# PostgreSQL "undefined_table"
UNDEFINED_TABLE_SQLSTATE = "42P01"


class PricedLine(Protocol):
    product_id: int
    price: Decimal
    quantity: int


@dataclass
class TaxRate:
    rate: Decimal
    tax_type: Optional[str] = None


@dataclass
class OrderTotals:
    """Money computed for a checkout before anything is written."""

    subtotals: list[Decimal]
    line_taxes: dict[int, Decimal] = field(default_factory=dict)
    total_tax: Decimal = Decimal("0.00")
    total_amount: Decimal = Decimal("0.00")
    loyalty_points: int = 0


def _is_missing_table(exc: Exception) -> bool:
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code == UNDEFINED_TABLE_SQLSTATE:
        return True
    message = str(orig or exc).lower()
    return "no such table" in message or "does not exist" in message


async def resolve_tax_rates(
    db: AsyncSession, product_ids: Iterable[int], *, enabled: bool = True
) -> dict[int, TaxRate]:
    """Map product id to its applicable tax rate.

    Products without a tax row are untaxed. When a product has several rows
    the newest one wins. A missing tax table is treated as "no taxes" so that
    checkout still works on schemas without it.
    """
    ids = sorted(set(product_ids))
    if not enabled or not ids:
        return {}

    try:
        result = await db.execute(
            select(Tax.product_id, Tax.tax_rate, Tax.tax_type)
            .where(Tax.product_id.in_(ids))
            .order_by(Tax.id)
        )
    except (ProgrammingError, OperationalError) as exc:
        if not _is_missing_table(exc):
            raise
        logger.warning("Tax table not found, continuing without tax")
        await db.rollback()
        return {}

    rates: dict[int, TaxRate] = {}
    for product_id, rate, tax_type in result.all():
        rates[product_id] = TaxRate(rate=Decimal(rate), tax_type=tax_type)
    return rates


def compute_totals(
    lines: list[PricedLine],
    rates: dict[int, TaxRate],
    *,
    points_per_unit: int = 10,
) -> OrderTotals:
    """Subtotals, per-line tax, order total and the loyalty points it earns.

    ``line_taxes`` is keyed by line index and only holds taxed lines. Each
    subtotal is rounded to cents, as it is stored per order item.
    """
    subtotals = [
        (Decimal(line.price) * line.quantity).quantize(CENT, rounding=ROUND_HALF_UP)
        for line in lines
    ]

    line_taxes: dict[int, Decimal] = {}
    for index, line in enumerate(lines):
        rate = rates.get(line.product_id)
        if rate is not None:
            line_taxes[index] = subtotals[index] * rate.rate / HUNDRED

    total_tax = sum(line_taxes.values(), Decimal(0)).quantize(
        CENT, rounding=ROUND_HALF_UP
    )
    total_amount = (sum(subtotals, Decimal(0)) + total_tax).quantize(
        CENT, rounding=ROUND_HALF_UP
    )
    loyalty_points = int(
        (total_amount / points_per_unit).to_integral_value(rounding=ROUND_DOWN)
    )

    return OrderTotals(
        subtotals=subtotals,
        line_taxes=line_taxes,
        total_tax=total_tax,
        total_amount=total_amount,
        loyalty_points=loyalty_points,
    )
