"""Store service routers package."""

from services.store_service.routers.cart import router as cart_router
from services.store_service.routers.discounts import router as discounts_router
from services.store_service.routers.orders import router as orders_router
from services.store_service.routers.returns import router as returns_router
from services.store_service.routers.support import router as support_router
from services.store_service.routers.wishlist import router as wishlist_router

__all__ = [
    "cart_router",
    "discounts_router",
    "orders_router",
    "returns_router",
    "support_router",
    "wishlist_router",
]
