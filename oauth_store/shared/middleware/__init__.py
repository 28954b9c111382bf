# oauth_store/shared/middleware/__init__.py (async version)

from oauth_store.shared.middleware.exception_middleware import AsyncExceptionMiddleware, store_exception_handler
from oauth_store.shared.middleware.logging_middleware import AsyncRequestLoggingMiddleware

# Export all for easy imports
__all__ = [
    "AsyncExceptionMiddleware",
    "AsyncRequestLoggingMiddleware",
    "store_exception_handler",
]
