"""Cart and wishlist line managers.

Both tables hold one row per (customer, product). The managers share the
keyed increment/decrement logic and differ in how a repeated ``add`` and the
line count behave.
"""

from typing import Optional

from libs.common.errors import ConflictError, NotFoundError
from libs.common.logging import get_logger
from services.store_service.models import CartItem, Product, WishlistItem
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


class _LineManager:
    model = None
    label = ""

    def __init__(self, db: AsyncSession, customer_id: int):
        self.db = db
        self.customer_id = customer_id

    def _line_filter(self, product_id: int):
        return (
            self.model.customer_id == self.customer_id,
            self.model.product_id == product_id,
        )

    def _line_query(self, product_id: int):
        return select(self.model).where(*self._line_filter(product_id))

    async def _get_line(self, product_id: int):
        result = await self.db.execute(self._line_query(product_id))
        return result.scalar_one_or_none()

    async def _require_product(self, product_id: int) -> Product:
        product = await self.db.get(Product, product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    async def remove(self, product_id: int) -> str:
        await self.db.execute(delete(self.model).where(*self._line_filter(product_id)))
        await self.db.commit()
        return f"Removed from {self.label}"

    async def _bump(self, product_id: int, delta: int, *criteria) -> bool:
        """Shift the line's quantity in SQL; False when no row matched."""
        result = await self.db.execute(
            update(self.model)
            .where(*self._line_filter(product_id), *criteria)
            .values(quantity=self.model.quantity + delta)
        )
        return result.rowcount > 0

    async def increment(self, product_id: int) -> str:
        if not await self._bump(product_id, 1):
            raise NotFoundError(f"Item not found in {self.label}")
        await self.db.commit()
        return "Quantity increased"

    async def decrement(self, product_id: int) -> str:
        """Decrease the quantity by one; a line at quantity 1 is deleted instead."""
        if await self._bump(product_id, -1, self.model.quantity > 1):
            await self.db.commit()
            return "Quantity decreased"

        result = await self.db.execute(
            delete(self.model).where(*self._line_filter(product_id))
        )
        if result.rowcount == 0:
            raise NotFoundError(f"Item not found in {self.label}")
        await self.db.commit()
        return f"Item removed from {self.label}"

    async def list(self) -> list[dict]:
        """Lines joined with their product, oldest first."""
        result = await self.db.execute(
            select(self.model, Product)
            .join(Product, Product.id == self.model.product_id)
            .where(self.model.customer_id == self.customer_id)
            .order_by(self.model.added_at, self.model.id)
        )
        return [self._serialize(line, product) for line, product in result.all()]

    def _serialize(self, line, product: Product) -> dict:
        return {
            "product_id": product.id,
            "name": product.name,
            "price": product.price,
            "description": product.description,
            "quantity": line.quantity,
            "added_at": line.added_at,
        }


class CartLines(_LineManager):
    model = CartItem
    label = "cart"

    async def add(self, product_id: int, quantity: int = 1) -> str:
        """Insert a line, or grow the existing one by ``quantity``."""
        await self._require_product(product_id)

        if await self._bump(product_id, quantity):
            await self.db.commit()
            return "Cart updated"

        self.db.add(
            CartItem(
                customer_id=self.customer_id, product_id=product_id, quantity=quantity
            )
        )
        try:
            await self.db.commit()
        except IntegrityError:
            # Another request inserted the same line first
            await self.db.rollback()
            await self._bump(product_id, quantity)
            await self.db.commit()
            return "Cart updated"

        logger.info(
            "Customer %s added product %s to cart (qty=%d)",
            self.customer_id,
            product_id,
            quantity,
        )
        return "Added to cart"

    async def count(self) -> int:
        """Total quantity across all cart lines."""
        result = await self.db.execute(
            select(func.coalesce(func.sum(CartItem.quantity), 0)).where(
                CartItem.customer_id == self.customer_id
            )
        )
        return int(result.scalar_one())


class WishlistLines(_LineManager):
    model = WishlistItem
    label = "wishlist"

    async def add(
        self, product_id: int, quantity: int = 1, priority: Optional[int] = None
    ) -> str:
        """Insert a line. A product already on the wishlist is a conflict."""
        await self._require_product(product_id)

        if await self._get_line(product_id) is not None:
            raise ConflictError("Product already in wishlist")

        self.db.add(
            WishlistItem(
                customer_id=self.customer_id,
                product_id=product_id,
                quantity=quantity,
                priority=priority if priority is not None else 1,
            )
        )
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Product already in wishlist")
        return "Added to wishlist"

    async def count(self) -> int:
        """Number of distinct products on the wishlist."""
        result = await self.db.execute(
            select(func.count(WishlistItem.id)).where(
                WishlistItem.customer_id == self.customer_id
            )
        )
        return int(result.scalar_one())

    def _serialize(self, line, product: Product) -> dict:
        data = super()._serialize(line, product)
        data["priority"] = line.priority
        return data
