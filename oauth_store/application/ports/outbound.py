# oauth_store/application/ports/outbound.py

"""
Outbound port implemented by every store backend.

Ids are accepted as hex strings (or bytes) and records are returned as
plain dicts whose ids are bytes. Lookups of missing rows return None;
updates and deletes of missing rows raise ResourceNotFoundException.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

Id = Union[str, bytes]
Record = Dict[str, Any]


class IStore(ABC):
    """Store backend interface."""

    @classmethod
    @abstractmethod
    async def connect(cls, settings) -> "IStore":
        """Open the backend and return a ready instance."""
        pass

    async def close(self) -> None:
        """Release backend resources. Nothing to do by default."""

    @abstractmethod
    async def ping(self) -> None:
        """Check that the backend answers."""
        pass

    # Clients

    @abstractmethod
    async def register_client(self, client: Record) -> Record:
        """Store a new client from a descriptor."""
        pass

    @abstractmethod
    async def get_client(self, client_id: Id) -> Optional[Record]:
        """Get client by id."""
        pass

    @abstractmethod
    async def get_clients(self) -> List[Record]:
        """List all clients."""
        pass

    @abstractmethod
    async def update_client(self, client: Record) -> Record:
        """Overwrite a client with the fields of a descriptor."""
        pass

    @abstractmethod
    async def remove_client(self, client_id: Id) -> None:
        """Delete a client and the tokens issued to it."""
        pass

    # Accounts

    @abstractmethod
    async def create_account(self, account: Record) -> Record:
        """Create an account; ``account['uid']`` is its id."""
        pass

    @abstractmethod
    async def get_account(self, uid: Id) -> Optional[Record]:
        """Get account by uid."""
        pass

    @abstractmethod
    async def delete_account(self, uid: Id) -> None:
        """Delete an account with its sessions, devices and tokens."""
        pass

    # Sessions

    @abstractmethod
    async def create_session_token(self, token_id: Id, uid: Id, data: Optional[Record] = None) -> Record:
        """Create a session token for an account."""
        pass

    @abstractmethod
    async def get_session_token(self, token_id: Id) -> Optional[Record]:
        """Get session token by id."""
        pass

    @abstractmethod
    async def delete_session_token(self, token_id: Id) -> None:
        """Delete a session token and the device registered on it."""
        pass

    # Tokens

    @abstractmethod
    async def generate_token(self, vals: Record) -> Record:
        """Issue an access token; the returned record carries the plaintext ``token``."""
        pass

    @abstractmethod
    async def get_access_token(self, token: Id) -> Optional[Record]:
        """Get an unexpired access token by its plaintext value."""
        pass

    @abstractmethod
    async def remove_access_token(self, token: Id) -> None:
        """Revoke an access token."""
        pass

    # Devices

    @abstractmethod
    async def create_device(self, uid: Id, session_token_id: Id, device: Record) -> Record:
        """Register a device on a session token."""
        pass

    @abstractmethod
    async def get_devices(self, uid: Id) -> List[Record]:
        """List the devices of an account."""
        pass

    @abstractmethod
    async def update_device(self, uid: Id, device_id: Id, changes: Record) -> Record:
        """Update the mutable fields of a device."""
        pass

    @abstractmethod
    async def delete_device(self, uid: Id, device_id: Id) -> None:
        """Delete a device."""
        pass


# Operations exposed by the store proxy, taken from the interface once.
STORE_OPERATIONS = tuple(sorted(
    name for name in IStore.__abstractmethods__ if name != "connect"
))
