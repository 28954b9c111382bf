# oauth_store/shared/middleware/exception_middleware.py (async version)

"""
Centralized exception handling.

Store errors carry their own status code and internal code; database and
unexpected errors are answered with a 500 whose detail is hidden in
production.
"""

import time
import logging
from typing import Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from oauth_store.adapters.configuration.config import settings
from oauth_store.domain.exceptions import StoreException

# Configure logger
logger = logging.getLogger(__name__)


async def store_exception_handler(request: Request, exc: StoreException) -> JSONResponse:
    """Registered for StoreException so the response includes the internal code."""
    logger.warning(
        f"Store exception: {exc.detail} | Code: {exc.internal_code} | "
        f"Path: {request.url.path}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.internal_code},
        headers=exc.headers,
    )


class AsyncExceptionMiddleware(BaseHTTPMiddleware):
    """
    Middleware for exceptions no handler took care of.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.time()
        try:
            response = await call_next(request)
            process_time = time.time() - start_time
            response.headers["X-Process-Time"] = str(process_time)
            return response

        except SQLAlchemyError as exc:
            if settings.ENVIRONMENT == "production":
                error_message = "Internal database error"
                logger.error(
                    f"Database error: Type={type(exc).__name__} | "
                    f"Path: {request.url.path}"
                )
            else:
                error_message = str(exc)
                logger.error(
                    f"Database error: {str(exc)} | "
                    f"Path: {request.url.path}"
                )

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "detail": error_message,
                    "code": "DATABASE_ERROR"
                }
            )

        except Exception as exc:
            if settings.ENVIRONMENT == "production":
                error_message = "Internal server error"
                logger.exception(
                    f"Unhandled exception: Type={type(exc).__name__} | "
                    f"Path: {request.url.path}"
                )
            else:
                error_message = str(exc)
                logger.exception(
                    f"Unhandled exception: {str(exc)} | "
                    f"Path: {request.url.path}"
                )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "detail": error_message,
                    "code": "INTERNAL_SERVER_ERROR"
                }
            )
