"""Unit tests for tax lookup and order totals."""

from dataclasses import dataclass
from decimal import Decimal

import pytest
from services.store_service.services.tax import TaxRate, compute_totals, resolve_tax_rates

from tests.factories import ProductFactory, TaxFactory


@dataclass
class _Line:
    product_id: int
    price: Decimal
    quantity: int


# ---------------------------------------------------------------------------
# compute_totals
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_totals_without_tax():
    totals = compute_totals([_Line(1, Decimal("20"), 2)], {})

    assert totals.subtotals == [Decimal("40")]
    assert totals.line_taxes == {}
    assert totals.total_tax == Decimal("0.00")
    assert totals.total_amount == Decimal("40.00")
    assert totals.loyalty_points == 4


@pytest.mark.unit
def test_totals_tax_only_applies_to_taxed_lines():
    lines = [_Line(1, Decimal("100"), 1), _Line(2, Decimal("50"), 2)]

    totals = compute_totals(lines, {1: TaxRate(rate=Decimal("5"))})

    assert totals.line_taxes == {0: Decimal("5")}
    assert totals.total_tax == Decimal("5.00")
    assert totals.total_amount == Decimal("205.00")
    assert totals.loyalty_points == 20


@pytest.mark.unit
def test_total_tax_is_rounded_to_cents():
    """Fractional cents are summed first and then rounded half-up."""
    lines = [_Line(1, Decimal("0.99"), 1), _Line(2, Decimal("0.99"), 1)]
    rates = {1: TaxRate(rate=Decimal("7.5")), 2: TaxRate(rate=Decimal("7.5"))}

    totals = compute_totals(lines, rates)

    # 2 x 0.074250 = 0.1485
    assert totals.total_tax == Decimal("0.15")
    assert totals.total_amount == Decimal("2.13")


@pytest.mark.unit
def test_subtotals_are_rounded_to_cents_and_add_up_to_total():
    lines = [_Line(1, Decimal("0.334"), 1), _Line(2, Decimal("0.334"), 1)]

    totals = compute_totals(lines, {})

    assert totals.subtotals == [Decimal("0.33"), Decimal("0.33")]
    assert totals.total_amount == Decimal("0.66")
    assert sum(totals.subtotals) + totals.total_tax == totals.total_amount


@pytest.mark.unit
def test_loyalty_points_round_down():
    totals = compute_totals([_Line(1, Decimal("19.99"), 1)], {})

    assert totals.loyalty_points == 1


@pytest.mark.unit
def test_loyalty_points_custom_rate():
    totals = compute_totals([_Line(1, Decimal("40"), 1)], {}, points_per_unit=5)

    assert totals.loyalty_points == 8


# ---------------------------------------------------------------------------
# resolve_tax_rates
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_newest_tax_row_wins(db_session):
    product = ProductFactory.create()
    untaxed = ProductFactory.create()
    db_session.add_all([product, untaxed])
    await db_session.flush()
    db_session.add(TaxFactory.create(product.id, tax_rate=Decimal("5.00")))
    await db_session.flush()
    db_session.add(TaxFactory.create(product.id, tax_rate=Decimal("8.00")))
    await db_session.commit()

    rates = await resolve_tax_rates(db_session, [product.id, untaxed.id, product.id])

    assert set(rates) == {product.id}
    assert rates[product.id].rate == Decimal("8.00")
    assert rates[product.id].tax_type == "VAT"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_disabled_tax_lookup_returns_nothing(db_session):
    product = ProductFactory.create()
    db_session.add(product)
    await db_session.flush()
    db_session.add(TaxFactory.create(product.id))
    await db_session.commit()

    assert await resolve_tax_rates(db_session, [product.id], enabled=False) == {}
