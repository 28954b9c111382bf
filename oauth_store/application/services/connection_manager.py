# oauth_store/application/services/connection_manager.py

"""
Lazy, shared connection to the store backend.

The first caller starts the connection attempt; everyone arriving before it
completes awaits the same attempt, so a connection epoch performs exactly
one connect and one run of the on-connect hook.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from oauth_store.application.ports.outbound import IStore

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Owns the single driver handle of a store.

    Attributes:
        connect: Coroutine function opening the backend
        on_connect: Coroutine function run once per epoch, after the handle is set
    """

    def __init__(
            self,
            connect: Callable[[], Awaitable[IStore]],
            on_connect: Optional[Callable[[IStore], Awaitable[None]]] = None,
    ):
        self.connect = connect
        self.on_connect = on_connect
        self._driver: Optional[IStore] = None
        self._pending: Optional[asyncio.Future] = None
        self.epoch = 0

    @property
    def connected(self) -> bool:
        return self._driver is not None

    async def ensure_connected(self) -> IStore:
        """
        Return the live driver, connecting first if needed.

        Raises:
            Whatever the connect call or the on-connect hook raised. A failed
            attempt is forgotten so the next call tries again.
        """
        if self._driver is not None:
            return self._driver

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._connect())
            self._pending.add_done_callback(_consume_exception)
        # shield: a cancelled caller must not cancel the attempt others wait on
        return await asyncio.shield(self._pending)

    async def _connect(self) -> IStore:
        pending = self._pending
        try:
            driver = await self.connect()
        except Exception as e:
            logger.error(f"Error connecting to store: {e}")
            self._forget(pending)
            raise

        self._driver = driver
        self.epoch += 1
        logger.debug(f"Connected to store (epoch {self.epoch}): {type(driver).__name__}")

        if self.on_connect is not None:
            try:
                await self.on_connect(driver)
            except Exception:
                if self._driver is driver:
                    self._driver = None
                self._forget(pending)
                await driver.close()
                raise

        self._forget(pending)
        return driver

    def _forget(self, pending: Optional[asyncio.Future]) -> None:
        if self._pending is pending:
            self._pending = None

    def disconnect(self) -> None:
        """
        Drop the handle without closing the backend.

        The next ensure_connected() call connects again and reruns the
        on-connect hook.
        """
        self._driver = None
        self._pending = None

    async def close(self) -> None:
        """Drop the handle and release the backend's resources."""
        driver = self._driver
        self.disconnect()
        if driver is not None:
            await driver.close()


def _consume_exception(attempt: asyncio.Future) -> None:
    # Waiters may all have been cancelled; the failure was already logged.
    if not attempt.cancelled():
        attempt.exception()
