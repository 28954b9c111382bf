# oauth_store/domain/__init__.py

"""
Domain components: exceptions, reconciliation outcomes and client comparison.
"""

# Export all exceptions for easy imports
from oauth_store.domain.exceptions import (
    StoreException,
    ResourceNotFoundException,
    ResourceAlreadyExistsException,
    DatabaseOperationException,
    BackendConnectionError,
    InvalidInputException,
    ConfigurationError,
)
