"""Tests for the lazily connected, shared store handle."""

import asyncio
import gc
from unittest.mock import AsyncMock

import pytest

from conftest import FakeConnector
from oauth_store.application.services.connection_manager import ConnectionManager
from oauth_store.domain.exceptions import BackendConnectionError, ConfigurationError


@pytest.mark.asyncio
async def test_connects_on_first_use_and_reuses_the_handle(backend):
    connector = FakeConnector(backend)
    manager = ConnectionManager(connect=connector)
    assert not manager.connected

    first = await manager.ensure_connected()
    second = await manager.ensure_connected()

    assert first is backend
    assert second is backend
    assert connector.calls == 1
    assert manager.epoch == 1


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_attempt(backend):
    connector = FakeConnector(backend)
    on_connect = AsyncMock()
    manager = ConnectionManager(connect=connector, on_connect=on_connect)

    drivers = await asyncio.gather(*(manager.ensure_connected() for _ in range(10)))

    assert all(driver is backend for driver in drivers)
    assert connector.calls == 1
    on_connect.assert_awaited_once_with(backend)


@pytest.mark.asyncio
async def test_failed_connect_reaches_every_waiter_and_allows_retry(backend):
    connector = FakeConnector(backend, failures=1)
    manager = ConnectionManager(connect=connector)

    results = await asyncio.gather(
        *(manager.ensure_connected() for _ in range(3)), return_exceptions=True
    )

    assert all(isinstance(r, BackendConnectionError) for r in results)
    assert connector.calls == 1
    assert not manager.connected

    assert await manager.ensure_connected() is backend
    assert connector.calls == 2


@pytest.mark.asyncio
async def test_on_connect_failure_closes_and_forgets_the_handle():
    driver = AsyncMock()
    connector = FakeConnector(driver)
    on_connect = AsyncMock(side_effect=[ConfigurationError("abc", "00"), None])
    manager = ConnectionManager(connect=connector, on_connect=on_connect)

    with pytest.raises(ConfigurationError):
        await manager.ensure_connected()

    assert not manager.connected
    driver.close.assert_awaited_once()

    assert await manager.ensure_connected() is driver
    assert connector.calls == 2
    assert on_connect.await_count == 2


@pytest.mark.asyncio
async def test_disconnect_starts_a_new_epoch(backend):
    connector = FakeConnector(backend)
    on_connect = AsyncMock()
    manager = ConnectionManager(connect=connector, on_connect=on_connect)

    await manager.ensure_connected()
    manager.disconnect()
    assert not manager.connected
    await manager.ensure_connected()

    assert connector.calls == 2
    assert on_connect.await_count == 2
    assert manager.epoch == 2


@pytest.mark.asyncio
async def test_close_releases_the_backend():
    driver = AsyncMock()
    manager = ConnectionManager(connect=FakeConnector(driver))

    await manager.ensure_connected()
    await manager.close()

    driver.close.assert_awaited_once()
    assert not manager.connected


@pytest.mark.asyncio
async def test_close_without_connection_is_a_noop():
    manager = ConnectionManager(connect=FakeConnector(AsyncMock()))
    await manager.close()
    assert not manager.connected


@pytest.mark.asyncio
async def test_failure_after_all_waiters_cancelled_is_not_reported_unretrieved():
    release = asyncio.Event()

    async def connect():
        await release.wait()
        raise BackendConnectionError(detail="backend is down")

    loop = asyncio.get_running_loop()
    reported = []
    loop.set_exception_handler(lambda _loop, context: reported.append(context))
    try:
        manager = ConnectionManager(connect=connect)
        waiter = asyncio.ensure_future(manager.ensure_connected())
        await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        release.set()
        for _ in range(5):
            await asyncio.sleep(0)
        del waiter
        gc.collect()

        assert reported == []
        assert not manager.connected
    finally:
        loop.set_exception_handler(None)
