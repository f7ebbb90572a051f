"""Unit tests for the Database handle's bounded admission."""

import asyncio

import pytest
from libs.common.errors import PoolExhaustedError
from libs.db.config import Database
from sqlalchemy import text


@pytest.mark.asyncio
@pytest.mark.unit
async def test_session_runs_queries(test_engine):
    database = Database(test_engine, pool_size=2, queue_limit=1, queue_timeout=1.0)

    async with database.session() as session:
        assert database.in_use == 1
        assert (await session.execute(text("SELECT 1"))).scalar_one() == 1

    assert database.in_use == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_full_queue_fails_fast(test_engine):
    """With every slot busy and no queue room, callers get a 503 immediately."""
    database = Database(test_engine, pool_size=1, queue_limit=0, queue_timeout=5.0)

    async with database.session():
        with pytest.raises(PoolExhaustedError) as exc_info:
            async with database.session():
                pass

    assert exc_info.value.status_code == 503
    assert exc_info.value.headers == {"Retry-After": "1"}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_queued_caller_times_out(test_engine):
    database = Database(test_engine, pool_size=1, queue_limit=1, queue_timeout=0.05)

    async with database.session():
        with pytest.raises(PoolExhaustedError):
            async with database.session():
                pass
        assert database.waiting == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_queued_caller_gets_released_slot(test_engine):
    database = Database(test_engine, pool_size=1, queue_limit=1, queue_timeout=2.0)
    acquired = asyncio.Event()

    async def waiter():
        async with database.session():
            acquired.set()

    async with database.session():
        task = asyncio.create_task(waiter())
        await asyncio.sleep(0.01)
        assert database.waiting == 1
        assert not acquired.is_set()

    await asyncio.wait_for(task, timeout=1.0)
    assert acquired.is_set()
    assert database.in_use == 0
