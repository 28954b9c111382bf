# oauth_store/application/services/__init__.py

from oauth_store.application.services.connection_manager import ConnectionManager
from oauth_store.application.services.store import Store

__all__ = ["ConnectionManager", "Store"]
