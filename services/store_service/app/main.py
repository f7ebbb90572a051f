"""FastAPI application for the Storefront Service."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.logging import get_logger
from libs.common.middleware import add_observability_middleware
from libs.db.base import Base
from libs.db.config import get_database
from services.loyalty_service import models as loyalty_models  # noqa: F401
from services.loyalty_service.routers import loyalty_router
from services.store_service import models as store_models  # noqa: F401
from services.store_service.routers import (
    cart_router,
    discounts_router,
    orders_router,
    returns_router,
    support_router,
    wishlist_router,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    database = get_database()
    if settings.CREATE_TABLES_ON_STARTUP:
        async with database.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")
    yield
    await database.dispose()


def create_app() -> FastAPI:
    """Create and configure the Storefront Service FastAPI app."""
    settings = get_settings()
    app = FastAPI(
        title="Storefront Service",
        version="0.1.0",
        description="E-commerce backend: carts, wishlists, checkout, orders, loyalty and after-sales.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Structured logging + request tracing
    add_observability_middleware(app)

    # Consistent 500 responses for database and unexpected errors
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": settings.SERVICE_NAME}

    app.include_router(cart_router)
    app.include_router(wishlist_router)
    app.include_router(orders_router)
    app.include_router(returns_router)
    app.include_router(support_router)
    app.include_router(discounts_router)
    app.include_router(loyalty_router)

    return app


app = create_app()
