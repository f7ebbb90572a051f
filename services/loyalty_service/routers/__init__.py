"""Loyalty service routers package."""

from services.loyalty_service.routers.loyalty import router as loyalty_router

__all__ = ["loyalty_router"]
