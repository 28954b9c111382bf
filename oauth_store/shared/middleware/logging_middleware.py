# oauth_store/shared/middleware/logging_middleware.py (async version)

"""
Middleware for HTTP request logging.
"""

import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from oauth_store.adapters.configuration.config import settings

# Configure logger
logger = logging.getLogger(__name__)


class AsyncRequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each received request and the response sent for it.
    """

    async def dispatch(self, request: Request, call_next):
        if settings.ENVIRONMENT == "production":
            logger.info(f"Request: {request.method} {request.url.path}")
        else:
            logger.info(
                f"Request: {request.method} {request.url.path} | "
                f"Client: {request.client.host if request.client else 'N/A'}"
            )

        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        logger.info(
            f"Response: {response.status_code} for {request.method} {request.url.path} | "
            f"Time: {process_time:.4f}s"
        )
        return response
