# oauth_store/adapters/outbound/persistence/drivers.py

import logging
from typing import Dict, Type

from oauth_store.adapters.outbound.persistence.memory_store import MemoryStore
from oauth_store.adapters.outbound.persistence.sql_store import SqlStore
from oauth_store.application.ports.outbound import IStore

logger = logging.getLogger(__name__)

# Store backends by DB_DRIVER value
DRIVERS: Dict[str, Type[IStore]] = {
    "memory": MemoryStore,
    "sql": SqlStore,
}


async def connect_driver(settings) -> IStore:
    """Open the backend selected by ``settings.DB_DRIVER``."""
    driver = DRIVERS[settings.DB_DRIVER]
    logger.debug(f"Connecting {driver.__name__}")
    return await driver.connect(settings)
