# oauth_store/application/services/store.py

"""
Store facade.

Every operation of the IStore port is available here as an async method
that connects on first use and forwards to the selected backend. On each new
connection the pre-defined clients from the configuration are provisioned.
"""

import logging
from typing import Awaitable, Callable, List, Optional

from oauth_store.adapters.configuration.config import Settings, settings as default_settings
from oauth_store.adapters.outbound.persistence.drivers import connect_driver
from oauth_store.application.ports.outbound import IStore, STORE_OPERATIONS
from oauth_store.application.services.connection_manager import ConnectionManager
from oauth_store.application.use_cases.client_reconciliation import ClientReconciler
from oauth_store.domain.models.client_domain_model import ReconciliationOutcome
from oauth_store.shared.logging import VERBOSE

logger = logging.getLogger(__name__)


class Store:
    """
    Connects lazily to the configured backend and proxies its operations.

    Args:
        settings: Source of DB_DRIVER, the backend parameters and CLIENTS
        connect: Overrides how the backend is opened (tests use fakes here)
    """

    def __init__(
            self,
            settings: Optional[Settings] = None,
            connect: Optional[Callable[[], Awaitable[IStore]]] = None,
    ):
        self.settings = settings if settings is not None else default_settings
        self.reconciler = ClientReconciler(self)
        self.connection = ConnectionManager(
            connect=connect or (lambda: connect_driver(self.settings)),
            on_connect=self._provision_clients,
        )

    async def connect(self) -> IStore:
        """Connect now instead of on first use; used by the entry points."""
        return await self.connection.ensure_connected()

    def disconnect(self) -> None:
        """Forget the backend handle; the next operation reconnects and reprovisions."""
        self.connection.disconnect()

    async def close(self) -> None:
        await self.connection.close()

    async def trigger_initial_reconciliation(self) -> List[ReconciliationOutcome]:
        """Provision the configured clients again, on demand."""
        return await self.reconciler.reconcile(self.configured_clients())

    def configured_clients(self) -> List[dict]:
        return [client.to_record() for client in self.settings.CLIENTS]

    async def _provision_clients(self, driver: IStore) -> None:
        logger.debug(f"connected to \"{self.settings.DB_DRIVER}\" store")
        await self.reconciler.reconcile(self.configured_clients())


def _proxy(method: str):
    async def proxied(self, *args, **kwargs):
        try:
            driver = await self.connection.ensure_connected()
            if logger.isEnabledFor(VERBOSE):
                logger.log(VERBOSE, "proxying %s > %r %r", method, args, kwargs)
            result = await getattr(driver, method)(*args, **kwargs)
        except Exception as e:
            logger.error("%s: %s (args %r %r)", method, e, args, kwargs)
            raise
        if logger.isEnabledFor(VERBOSE):
            logger.log(VERBOSE, "proxied %s < %r", method, result)
        return result

    proxied.__name__ = method
    proxied.__qualname__ = f"Store.{method}"
    proxied.__doc__ = getattr(IStore, method).__doc__
    return proxied


for _method in STORE_OPERATIONS:
    setattr(Store, _method, _proxy(_method))
del _method
