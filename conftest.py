import os
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

# Tests never touch a configured database
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from libs.auth.dependencies import get_current_user  # noqa: E402
from libs.auth.models import AuthUser  # noqa: E402
from libs.common.config import get_settings  # noqa: E402
from libs.db.base import Base  # noqa: E402
from libs.db.config import Database, get_database  # noqa: E402

# Import all models so metadata includes every table
from services.loyalty_service import models as _loyalty_models  # noqa: F401,E402
from services.store_service import models as _store_models  # noqa: F401,E402
from services.store_service.app.main import app  # noqa: E402

get_settings.cache_clear()
settings = get_settings()


@pytest_asyncio.fixture
async def test_engine():
    """
    Fresh in-memory SQLite database per test, shared by every session.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def database(test_engine) -> Database:
    return Database(test_engine, pool_size=3, queue_limit=10, queue_timeout=2.0)


@pytest_asyncio.fixture
async def db_session(database) -> AsyncGenerator[AsyncSession, None]:
    """
    Session for arranging data and asserting on it. Bypasses admission
    control so it never takes a slot from the code under test.
    """
    async with database.session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(database) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient bound to the app with the test database injected.
    """
    app.dependency_overrides[get_database] = lambda: database

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def login_as() -> Callable[..., AuthUser]:
    """
    Authenticate subsequent requests as the given customer.

    Usage:
        login_as(customer.id)
        login_as(staff.id, role="admin")
    """

    def _login(customer_id: int, role: str = "customer") -> AuthUser:
        user = AuthUser(id=customer_id, email=f"customer{customer_id}@test.com", role=role)
        app.dependency_overrides[get_current_user] = lambda: user
        return user

    return _login


@pytest.fixture
def auth_headers() -> dict:
    """
    Bearer header for overridden auth; the token itself is never decoded.
    """
    return {"Authorization": "Bearer mock-token"}
