import asyncio
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from libs.common.config import Settings, get_settings
from libs.common.errors import PoolExhaustedError
from libs.common.logging import get_logger

logger = get_logger(__name__)


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Build the async engine. Pool sizing only applies to server databases."""
    kwargs = {
        "echo": settings.DB_ECHO,
        "future": True,
        "pool_pre_ping": True,
    }
    if not settings.DATABASE_URL.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=0,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
        )
    return create_async_engine(settings.DATABASE_URL, **kwargs)


class Database:
    """Handle to the database shared by every component that persists data.

    Admission is bounded: at most ``pool_size`` sessions are open at once,
    at most ``queue_limit`` callers wait for a free slot, and each waits at
    most ``queue_timeout`` seconds. Anything beyond that raises
    ``PoolExhaustedError`` instead of blocking the request.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        *,
        pool_size: int,
        queue_limit: int,
        queue_timeout: float,
    ):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )
        self.pool_size = pool_size
        self.queue_limit = queue_limit
        self.queue_timeout = queue_timeout
        self._slots = asyncio.Semaphore(pool_size)
        self._in_use = 0
        self._waiting = 0

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Database":
        settings = settings or get_settings()
        return cls(
            create_engine_from_settings(settings),
            pool_size=settings.DB_POOL_SIZE,
            queue_limit=settings.DB_QUEUE_LIMIT,
            queue_timeout=settings.DB_POOL_TIMEOUT,
        )

    @property
    def in_use(self) -> int:
        return self._in_use

    @property
    def waiting(self) -> int:
        return self._waiting

    async def _acquire_slot(self) -> None:
        if not self._slots.locked():
            await self._slots.acquire()
            return

        if self._waiting >= self.queue_limit:
            logger.warning(
                "Database queue full (in_use=%d, waiting=%d), rejecting request",
                self._in_use,
                self._waiting,
            )
            raise PoolExhaustedError()

        self._waiting += 1
        try:
            await asyncio.wait_for(self._slots.acquire(), timeout=self.queue_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Timed out after %.1fs waiting for a database slot", self.queue_timeout
            )
            raise PoolExhaustedError()
        finally:
            self._waiting -= 1

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session once a slot is free; release the slot on exit."""
        await self._acquire_slot()
        self._in_use += 1
        try:
            async with self.session_factory() as session:
                yield session
        finally:
            self._in_use -= 1
            self._slots.release()

    async def dispose(self) -> None:
        await self.engine.dispose()


@lru_cache
def get_database() -> Database:
    """
    Return the process-wide database handle, cached.
    """
    return Database.from_settings(get_settings())
