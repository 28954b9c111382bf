# oauth_store/adapters/outbound/persistence/models/__init__.py

"""
SQLAlchemy models of the relational store.

Importing this package registers every table on Base.metadata.
"""

from oauth_store.adapters.outbound.persistence.models.base_model import Base, as_dict
from oauth_store.adapters.outbound.persistence.models.client_model import Client
from oauth_store.adapters.outbound.persistence.models.account_model import Account
from oauth_store.adapters.outbound.persistence.models.session_token_model import SessionToken
from oauth_store.adapters.outbound.persistence.models.token_model import Token
from oauth_store.adapters.outbound.persistence.models.device_model import Device

__all__ = [
    "Base",
    "as_dict",
    "Client",
    "Account",
    "SessionToken",
    "Token",
    "Device",
]
