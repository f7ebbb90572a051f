"""Integration tests for the cart and wishlist endpoints."""

import pytest

from tests.factories import CustomerFactory, ProductFactory, WishlistItemFactory


async def _seed(db, products=1):
    customer = CustomerFactory.create()
    items = [ProductFactory.create() for _ in range(products)]
    db.add(customer)
    db.add_all(items)
    await db.commit()
    return customer, items


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cart_lifecycle(client, db_session, login_as):
    """Add, increment, decrement and count through the HTTP API."""
    customer, (product,) = await _seed(db_session)
    login_as(customer.id)

    response = await client.post("/cart/add", json={"productId": product.id})
    assert response.status_code == 200, response.text
    assert response.json() == {"message": "Added to cart"}

    response = await client.post(
        "/cart/add", json={"productId": product.id, "quantity": 2}
    )
    assert response.json() == {"message": "Cart updated"}

    await client.post("/cart/increment", json={"productId": product.id})
    await client.post("/cart/decrement", json={"productId": product.id})

    response = await client.get("/cart/count")
    assert response.json() == {"count": 3}

    response = await client.get("/cart")
    assert response.status_code == 200
    (line,) = response.json()
    assert line["productId"] == product.id
    assert line["name"] == product.name
    assert line["price"] == 20.0
    assert line["quantity"] == 3


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cart_decrement_last_unit_removes_line(client, db_session, login_as):
    customer, (product,) = await _seed(db_session)
    login_as(customer.id)
    await client.post("/cart/add", json={"productId": product.id})

    response = await client.post("/cart/decrement", json={"productId": product.id})

    assert response.status_code == 200
    assert (await client.get("/cart")).json() == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cart_unknown_product_and_missing_line(client, db_session, login_as):
    customer, (product,) = await _seed(db_session)
    login_as(customer.id)

    response = await client.post("/cart/add", json={"productId": 9999})
    assert response.status_code == 404

    response = await client.post("/cart/increment", json={"productId": product.id})
    assert response.status_code == 404
    assert response.json()["detail"] == "Item not found in cart"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cart_rejects_invalid_quantity(client, db_session, login_as):
    customer, (product,) = await _seed(db_session)
    login_as(customer.id)

    response = await client.post(
        "/cart/add", json={"productId": product.id, "quantity": 0}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_cart_remove(client, db_session, login_as):
    customer, (product,) = await _seed(db_session)
    login_as(customer.id)
    await client.post("/cart/add", json={"productId": product.id, "quantity": 5})

    response = await client.post("/cart/remove", json={"productId": product.id})

    assert response.status_code == 200
    assert (await client.get("/cart/count")).json() == {"count": 0}


# ---------------------------------------------------------------------------
# Wishlist
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_wishlist_add_and_duplicate(client, db_session, login_as):
    customer, (product,) = await _seed(db_session)
    login_as(customer.id)

    response = await client.post(
        "/wishlist/add", json={"productId": product.id, "priority": 3}
    )
    assert response.status_code == 200, response.text

    response = await client.post("/wishlist/add", json={"productId": product.id})
    assert response.status_code == 409

    (line,) = (await client.get("/wishlist")).json()
    assert line["priority"] == 3
    assert line["quantity"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_wishlist_count_and_decrement(client, db_session, login_as):
    customer, (first, second) = await _seed(db_session, products=2)
    db_session.add_all(
        [
            WishlistItemFactory.create(customer.id, first.id, quantity=2),
            WishlistItemFactory.create(customer.id, second.id),
        ]
    )
    await db_session.commit()
    login_as(customer.id)

    assert (await client.get("/wishlist/count")).json() == {"count": 2}

    await client.post("/wishlist/decrement", json={"productId": second.id})
    await client.post("/wishlist/increment", json={"productId": first.id})

    lines = (await client.get("/wishlist")).json()
    assert [(line["productId"], line["quantity"]) for line in lines] == [(first.id, 3)]

    response = await client.post("/wishlist/remove", json={"productId": first.id})
    assert response.status_code == 200
    assert (await client.get("/wishlist/count")).json() == {"count": 0}
