# oauth_store/main.py (async version)

import sys
import asyncio
import logging
from typing import Optional
from fastapi import FastAPI
from contextlib import asynccontextmanager

from oauth_store.adapters.configuration.config import Settings, settings as default_settings
from oauth_store.application.services.store import Store
from oauth_store.domain.exceptions import BackendConnectionError, ConfigurationError, StoreException
from oauth_store.shared.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Connects the store, provisioning the pre-defined clients, before serving.

    A client configured with a plaintext secret stops the process with exit
    status 1. An unreachable backend is only logged: the store reconnects on
    the next operation and the heartbeat reports the failure meanwhile.
    """
    logger.info("Application starting up...")
    store: Store = app.state.store
    try:
        await store.connect()
    except ConfigurationError as e:
        logger.critical(str(e))
        sys.exit(1)
    except BackendConnectionError as e:
        logger.error(f"Store unavailable at startup: {e}")

    yield

    logger.info("Application shutting down...")
    await store.close()


def create_app(settings: Optional[Settings] = None, store: Optional[Store] = None) -> FastAPI:
    settings = settings if settings is not None else default_settings

    app = FastAPI(
        title="oauth-store",
        description="OAuth store with pre-defined client provisioning",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.store = store if store is not None else Store(settings)

    # Middlewares
    from oauth_store.shared.middleware import (
        AsyncExceptionMiddleware,
        AsyncRequestLoggingMiddleware,
        store_exception_handler,
    )

    app.add_middleware(AsyncRequestLoggingMiddleware)
    app.add_middleware(AsyncExceptionMiddleware)
    app.add_exception_handler(StoreException, store_exception_handler)

    # Routers
    from oauth_store.adapters.inbound.api.router import api_router

    app.include_router(api_router)
    return app


configure_logging(default_settings)
app = create_app()


async def provision(store: Store) -> None:
    try:
        await store.connect()
    finally:
        await store.close()


def cli() -> None:
    """
    oauth-store-provision: provision the pre-defined clients and exit.

    Exits with status 1 when a client carries a plaintext secret or the
    store can't be reached.
    """
    try:
        asyncio.run(provision(Store(default_settings)))
    except ConfigurationError as e:
        logger.critical(str(e))
        sys.exit(1)
    except StoreException as e:
        logger.error(f"Provisioning failed: {e}")
        sys.exit(1)
