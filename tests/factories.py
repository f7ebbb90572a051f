"""
Model factories for creating valid test data.

Every factory produces a valid, insertable SQLAlchemy model instance.
Override any field via kwargs.

Usage:
    customer = CustomerFactory.create(name="Ada")
    db_session.add(customer)
    await db_session.commit()
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _unique_email() -> str:
    return f"test-{uuid.uuid4().hex[:8]}@test.com"


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class CustomerFactory:
    @staticmethod
    def create(**overrides):
        from services.store_service.models import Customer

        defaults = {
            "name": "Test Customer",
            "email": _unique_email(),
            "contact_no": "+15550100",
            "address": "1 Test Street",
            "created_at": _now(),
        }
        defaults.update(overrides)
        return Customer(**defaults)


class ProductFactory:
    @staticmethod
    def create(**overrides):
        from services.store_service.models import Product

        defaults = {
            "name": f"Product {uuid.uuid4().hex[:6]}",
            "price": Decimal("20.00"),
            "description": "A test product",
            "created_at": _now(),
        }
        defaults.update(overrides)
        return Product(**defaults)


class DiscountFactory:
    @staticmethod
    def create(**overrides):
        from services.store_service.models import Discount

        defaults = {
            "code": f"SAVE{uuid.uuid4().hex[:4].upper()}",
            "percentage": Decimal("10.00"),
            "is_active": True,
        }
        defaults.update(overrides)
        return Discount(**defaults)


# ---------------------------------------------------------------------------
# Commerce
# ---------------------------------------------------------------------------


class CartItemFactory:
    @staticmethod
    def create(customer_id: int, product_id: int, **overrides):
        from services.store_service.models import CartItem

        defaults = {
            "customer_id": customer_id,
            "product_id": product_id,
            "quantity": 1,
            "added_at": _now(),
        }
        defaults.update(overrides)
        return CartItem(**defaults)


class WishlistItemFactory:
    @staticmethod
    def create(customer_id: int, product_id: int, **overrides):
        from services.store_service.models import WishlistItem

        defaults = {
            "customer_id": customer_id,
            "product_id": product_id,
            "quantity": 1,
            "priority": 1,
            "added_at": _now(),
        }
        defaults.update(overrides)
        return WishlistItem(**defaults)


class TaxFactory:
    @staticmethod
    def create(product_id: int, **overrides):
        from services.store_service.models import Tax

        defaults = {
            "product_id": product_id,
            "tax_rate": Decimal("5.00"),
            "tax_type": "VAT",
        }
        defaults.update(overrides)
        return Tax(**defaults)


# ---------------------------------------------------------------------------
# Loyalty
# ---------------------------------------------------------------------------


class LoyaltyPointsFactory:
    @staticmethod
    def create(customer_id: int, **overrides):
        from services.loyalty_service.models import LoyaltyPoints

        defaults = {
            "customer_id": customer_id,
            "points": 0,
            "earned_date": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return LoyaltyPoints(**defaults)


class PointsHistoryFactory:
    @staticmethod
    def create(customer_id: int, **overrides):
        from services.loyalty_service.models import PointsHistory

        defaults = {
            "customer_id": customer_id,
            "points": 10,
            "description": "Points earned from order",
            "date": _now(),
        }
        defaults.update(overrides)
        return PointsHistory(**defaults)
