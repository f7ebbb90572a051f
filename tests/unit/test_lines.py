"""Unit tests for the cart and wishlist line managers."""

import asyncio

import pytest
from libs.common.errors import ConflictError, NotFoundError
from services.store_service.models import CartItem, WishlistItem
from services.store_service.services.lines import CartLines, WishlistLines
from sqlalchemy import select

from tests.factories import (
    CartItemFactory,
    CustomerFactory,
    ProductFactory,
    WishlistItemFactory,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _make_customer_and_products(db, count=1):
    customer = CustomerFactory.create()
    products = [ProductFactory.create() for _ in range(count)]
    db.add(customer)
    db.add_all(products)
    await db.commit()
    return customer, products


async def _quantity(db, model, customer_id, product_id):
    result = await db.execute(
        select(model.quantity).where(
            model.customer_id == customer_id, model.product_id == product_id
        )
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_cart_add_inserts_then_increments(db_session):
    customer, (product,) = await _make_customer_and_products(db_session)
    cart = CartLines(db_session, customer.id)

    assert await cart.add(product.id) == "Added to cart"
    assert await cart.add(product.id, 2) == "Cart updated"

    assert await _quantity(db_session, CartItem, customer.id, product.id) == 3


@pytest.mark.asyncio
@pytest.mark.unit
async def test_concurrent_cart_adds_are_not_lost(db_session, database):
    customer, (product,) = await _make_customer_and_products(db_session)
    db_session.add(CartItemFactory.create(customer.id, product.id, quantity=1))
    await db_session.commit()

    async def add_one():
        async with database.session() as db:
            return await CartLines(db, customer.id).add(product.id, 1)

    messages = await asyncio.gather(add_one(), add_one())

    assert messages == ["Cart updated", "Cart updated"]
    assert await _quantity(db_session, CartItem, customer.id, product.id) == 3


@pytest.mark.asyncio
@pytest.mark.unit
async def test_concurrent_increments_are_not_lost(db_session, database):
    customer, (product,) = await _make_customer_and_products(db_session)
    db_session.add(CartItemFactory.create(customer.id, product.id, quantity=1))
    await db_session.commit()

    async def increment():
        async with database.session() as db:
            await CartLines(db, customer.id).increment(product.id)

    await asyncio.gather(increment(), increment(), increment())

    assert await _quantity(db_session, CartItem, customer.id, product.id) == 4


@pytest.mark.asyncio
@pytest.mark.unit
async def test_cart_add_unknown_product(db_session):
    customer, _ = await _make_customer_and_products(db_session)

    with pytest.raises(NotFoundError):
        await CartLines(db_session, customer.id).add(9999)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_cart_decrement_above_one_decreases(db_session):
    customer, (product,) = await _make_customer_and_products(db_session)
    db_session.add(CartItemFactory.create(customer.id, product.id, quantity=3))
    await db_session.commit()

    await CartLines(db_session, customer.id).decrement(product.id)

    assert await _quantity(db_session, CartItem, customer.id, product.id) == 2


@pytest.mark.asyncio
@pytest.mark.unit
async def test_cart_decrement_at_one_removes_line(db_session):
    customer, (product,) = await _make_customer_and_products(db_session)
    db_session.add(CartItemFactory.create(customer.id, product.id, quantity=1))
    await db_session.commit()

    message = await CartLines(db_session, customer.id).decrement(product.id)

    assert message == "Item removed from cart"
    assert await _quantity(db_session, CartItem, customer.id, product.id) is None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_cart_increment_and_decrement_missing_line(db_session):
    customer, (product,) = await _make_customer_and_products(db_session)
    cart = CartLines(db_session, customer.id)

    with pytest.raises(NotFoundError):
        await cart.increment(product.id)
    with pytest.raises(NotFoundError):
        await cart.decrement(product.id)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_cart_remove_is_unconditional(db_session):
    customer, (product, other) = await _make_customer_and_products(db_session, 2)
    db_session.add(CartItemFactory.create(customer.id, product.id, quantity=4))
    await db_session.commit()
    cart = CartLines(db_session, customer.id)

    await cart.remove(product.id)
    await cart.remove(other.id)

    assert await cart.count() == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_cart_count_sums_quantities(db_session):
    customer, (first, second) = await _make_customer_and_products(db_session, 2)
    cart = CartLines(db_session, customer.id)
    assert await cart.count() == 0

    db_session.add_all(
        [
            CartItemFactory.create(customer.id, first.id, quantity=2),
            CartItemFactory.create(customer.id, second.id, quantity=3),
        ]
    )
    await db_session.commit()

    assert await cart.count() == 5


@pytest.mark.asyncio
@pytest.mark.unit
async def test_cart_list_includes_product_details(db_session):
    customer, (product,) = await _make_customer_and_products(db_session)
    db_session.add(CartItemFactory.create(customer.id, product.id, quantity=2))
    await db_session.commit()

    lines = await CartLines(db_session, customer.id).list()

    assert len(lines) == 1
    assert lines[0]["product_id"] == product.id
    assert lines[0]["name"] == product.name
    assert lines[0]["price"] == product.price
    assert lines[0]["quantity"] == 2


# ---------------------------------------------------------------------------
# Wishlist
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_wishlist_add_twice_conflicts(db_session):
    customer, (product,) = await _make_customer_and_products(db_session)
    wishlist = WishlistLines(db_session, customer.id)

    assert await wishlist.add(product.id, priority=2) == "Added to wishlist"
    with pytest.raises(ConflictError):
        await wishlist.add(product.id)

    assert await _quantity(db_session, WishlistItem, customer.id, product.id) == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_wishlist_count_is_number_of_products(db_session):
    customer, (first, second) = await _make_customer_and_products(db_session, 2)
    db_session.add_all(
        [
            WishlistItemFactory.create(customer.id, first.id, quantity=4),
            WishlistItemFactory.create(customer.id, second.id, quantity=1),
        ]
    )
    await db_session.commit()

    assert await WishlistLines(db_session, customer.id).count() == 2


@pytest.mark.asyncio
@pytest.mark.unit
async def test_wishlist_increment_then_decrement(db_session):
    customer, (product,) = await _make_customer_and_products(db_session)
    db_session.add(WishlistItemFactory.create(customer.id, product.id, quantity=1))
    await db_session.commit()
    wishlist = WishlistLines(db_session, customer.id)

    await wishlist.increment(product.id)
    assert await _quantity(db_session, WishlistItem, customer.id, product.id) == 2

    await wishlist.decrement(product.id)
    await wishlist.decrement(product.id)
    assert await _quantity(db_session, WishlistItem, customer.id, product.id) is None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_lines_are_scoped_to_customer(db_session):
    customer, (product,) = await _make_customer_and_products(db_session)
    other = CustomerFactory.create()
    db_session.add(other)
    await db_session.flush()
    db_session.add(CartItemFactory.create(other.id, product.id, quantity=5))
    await db_session.commit()

    cart = CartLines(db_session, customer.id)

    assert await cart.count() == 0
    assert await cart.list() == []
    with pytest.raises(NotFoundError):
        await cart.increment(product.id)
