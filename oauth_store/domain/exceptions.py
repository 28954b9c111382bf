# oauth_store/domain/exceptions.py

"""
Custom exceptions for the store.

Errors raised by the store drivers extend HTTPException so the service
layer can turn them into responses with a meaningful status code.
ConfigurationError is not an HTTP error: it means the process was started
with a configuration it must refuse to run with.
"""

from fastapi import HTTPException, status
from typing import Any, Dict, Optional


class StoreException(HTTPException):
    """
    Base exception for store errors.
    Extends FastAPI's HTTPException to carry an internal code.
    """

    def __init__(
            self,
            status_code: int,
            detail: Any = None,
            headers: Optional[Dict[str, Any]] = None,
            internal_code: Optional[str] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.internal_code = internal_code

    def __str__(self) -> str:
        return str(self.detail)


class ResourceNotFoundException(StoreException):
    """Resource not found."""

    def __init__(self, detail: str = "Resource not found", resource_id: Any = None):
        resource_info = f" (ID: {resource_id})" if resource_id is not None else ""
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{detail}{resource_info}",
            internal_code="RESOURCE_NOT_FOUND"
        )


class ResourceAlreadyExistsException(StoreException):
    """Resource already exists."""

    def __init__(self, detail: str = "Resource already exists", resource_id: Any = None):
        resource_info = f" (ID: {resource_id})" if resource_id is not None else ""
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"{detail}{resource_info}",
            internal_code="RESOURCE_ALREADY_EXISTS"
        )


class DatabaseOperationException(StoreException):
    """Error executing a database operation."""

    def __init__(self, detail: str = "Error executing database operation",
                 original_error: Optional[Exception] = None):
        error_info = f": {str(original_error)}" if original_error else ""
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{detail}{error_info}",
            internal_code="DATABASE_OPERATION_ERROR"
        )
        self.original_error = original_error


class BackendConnectionError(StoreException):
    """The store backend could not be reached."""

    def __init__(self, detail: str = "Could not connect to the store backend",
                 original_error: Optional[Exception] = None):
        error_info = f": {str(original_error)}" if original_error else ""
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{detail}{error_info}",
            internal_code="BACKEND_UNAVAILABLE"
        )
        self.original_error = original_error


class InvalidInputException(StoreException):
    """Invalid input data."""

    def __init__(self, detail: str = "Invalid input data", fields: Optional[Dict[str, str]] = None):
        field_errors = ""
        if fields:
            field_errors = ": " + ", ".join([f"{field}: {error}" for field, error in fields.items()])

        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{detail}{field_errors}",
            internal_code="INVALID_INPUT"
        )


class ConfigurationError(Exception):
    """
    A pre-defined client carries its plaintext secret.

    Attributes:
        client_id: Id of the offending client
        hashed_secret: Value to put in ``hashed_secret`` instead
    """

    def __init__(self, client_id: str, hashed_secret: str):
        self.client_id = client_id
        self.hashed_secret = hashed_secret
        super().__init__(
            "Do not keep client secrets in the config file. "
            "Use the `hashed_secret` field instead.\n\n"
            f"\tclient={client_id} has `secret` field\n"
            f"\tuse hashed_secret=\"{hashed_secret}\" instead"
        )
