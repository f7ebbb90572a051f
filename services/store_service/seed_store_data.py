"""Seed script for storefront demo data.

Creates a couple of customers, a small catalog with tax rates and discount
codes so the cart and checkout flow can be tried end-to-end. Tables are
created first if they do not exist yet.

Usage:
    python -m services.store_service.seed_store_data
"""

import asyncio
from decimal import Decimal

from sqlalchemy import func, select

from libs.db.base import Base
from libs.db.config import Database
from services.loyalty_service import models as _loyalty_models  # noqa: F401
from services.store_service.models import Customer, Discount, Product, Tax


async def seed_store_data(database: Database):
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with database.session() as db:
        print("Seeding storefront data...")

        count = (await db.execute(select(func.count(Product.id)))).scalar_one()
        if count:
            print(f"Store data already exists ({count} products). Skipping seed.")
            return

        # =====================================================================
        # 1. CUSTOMERS
        # =====================================================================
        db.add_all(
            [
                Customer(
                    name="Ada Lovelace",
                    email="ada@example.com",
                    contact_no="+44 20 7946 0001",
                    address="12 St James's Square, London",
                ),
                Customer(
                    name="Grace Hopper",
                    email="grace@example.com",
                    contact_no="+1 212 555 0100",
                    address="350 Fifth Avenue, New York",
                ),
            ]
        )

        # =====================================================================
        # 2. PRODUCTS
        # =====================================================================
        products = [
            Product(name="Canvas Tote", price=Decimal("20.00"), description="Heavy cotton tote bag", category_id=1),
            Product(name="Desk Lamp", price=Decimal("100.00"), description="Adjustable LED lamp", category_id=2),
            Product(name="Notebook", price=Decimal("7.50"), description="A5 dotted notebook", category_id=3),
            Product(name="Fountain Pen", price=Decimal("45.00"), description="Steel nib, medium", category_id=3),
        ]
        db.add_all(products)
        await db.flush()

        # =====================================================================
        # 3. TAX RATES
        # =====================================================================
        db.add_all(
            [
                Tax(product_id=products[1].id, tax_rate=Decimal("5.00"), tax_type="VAT"),
                Tax(product_id=products[3].id, tax_rate=Decimal("12.50"), tax_type="Luxury"),
            ]
        )

        # =====================================================================
        # 4. DISCOUNT CODES
        # =====================================================================
        db.add_all(
            [
                Discount(code="WELCOME10", percentage=Decimal("10.00")),
                Discount(code="SPRING15", percentage=Decimal("15.00")),
                Discount(code="LAUNCH50", percentage=Decimal("50.00"), is_active=False),
            ]
        )

        await db.commit()
        print(f"Seeded 2 customers, {len(products)} products, 2 tax rates, 3 discount codes.")


async def main():
    database = Database.from_settings()
    try:
        await seed_store_data(database)
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
