"""Integration tests for the loyalty endpoints and token verification."""

import pytest
from jose import jwt
from libs.common.config import get_settings

from tests.factories import CustomerFactory, LoyaltyPointsFactory, PointsHistoryFactory


async def _customer_with_points(db, points):
    customer = CustomerFactory.create()
    db.add(customer)
    await db.flush()
    db.add(LoyaltyPointsFactory.create(customer.id, points=points))
    db.add(PointsHistoryFactory.create(customer.id, points=points))
    await db.commit()
    return customer


@pytest.mark.asyncio
@pytest.mark.integration
async def test_redeem_points(client, db_session, login_as):
    customer = await _customer_with_points(db_session, 1200)
    login_as(customer.id)

    response = await client.post("/loyalty/redeem", json={"points": 1000})

    assert response.status_code == 200, response.text
    assert response.json() == {"success": True, "discount": 12}

    summary = (await client.get("/loyalty/points")).json()
    assert summary["points"] == 200
    assert [h["points"] for h in summary["history"]] == [-1000, 1200]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_redeem_more_than_balance(client, db_session, login_as):
    customer = await _customer_with_points(db_session, 50)
    login_as(customer.id)

    response = await client.post("/loyalty/redeem", json={"points": 100})

    assert response.status_code == 400
    assert response.json()["detail"] == "Not enough points"
    assert (await client.get("/loyalty/points")).json()["points"] == 50


@pytest.mark.asyncio
@pytest.mark.integration
async def test_redeem_requires_positive_points(client, db_session, login_as):
    customer = await _customer_with_points(db_session, 50)
    login_as(customer.id)

    response = await client.post("/loyalty/redeem", json={"points": 0})

    assert response.status_code == 422


# ---------------------------------------------------------------------------
# Bearer tokens
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_valid_token_identifies_customer(client, db_session):
    customer = await _customer_with_points(db_session, 30)
    settings = get_settings()
    token = jwt.encode(
        {"id": customer.id, "email": customer.email},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )

    response = await client.get(
        "/loyalty/points", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 200, response.text
    assert response.json()["points"] == 30


@pytest.mark.asyncio
@pytest.mark.integration
async def test_token_signed_with_wrong_secret_is_rejected(client):
    token = jwt.encode({"id": 1}, "not-the-secret", algorithm="HS256")

    response = await client.get(
        "/loyalty/points", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_missing_token_is_rejected(client):
    response = await client.get("/cart")

    assert response.status_code in (401, 403)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health_check(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers
