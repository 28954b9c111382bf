# oauth_store/adapters/outbound/persistence/memory_store.py

"""
In-memory store backend.

Keeps every table in a dict keyed by the hex form of its id. Meant for
development and tests; nothing survives the process.
"""

import copy
import logging
import secrets
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from oauth_store.adapters.outbound.security import encrypt
from oauth_store.application.ports.outbound import IStore, Id, Record
from oauth_store.domain.exceptions import (
    ResourceNotFoundException,
    ResourceAlreadyExistsException,
)
from oauth_store.shared.utils.encoding import buf, unbuf

logger = logging.getLogger(__name__)

CLIENT_DEFAULTS = {"image_uri": "", "whitelisted": False, "can_grant": False, "trusted": False}
CLIENT_FIELDS = ("name", "image_uri", "redirect_uri", "whitelisted", "can_grant", "trusted")
ACCOUNT_FIELDS = ("email", "email_verified", "locale")
SESSION_FIELDS = ("user_agent",)
DEVICE_FIELDS = ("name", "type", "push_callback")


def _key(value: Id) -> str:
    return unbuf(buf(value))


class MemoryStore(IStore):
    """IStore backed by dicts."""

    def __init__(self, token_ttl: timedelta = timedelta(days=14)):
        self.token_ttl = token_ttl
        self.clients: Dict[str, Record] = {}
        self.accounts: Dict[str, Record] = {}
        self.session_tokens: Dict[str, Record] = {}
        self.tokens: Dict[str, Record] = {}
        self.devices: Dict[str, Record] = {}

    @classmethod
    async def connect(cls, settings) -> "MemoryStore":
        logger.debug("Creating in-memory store")
        return cls(token_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    async def ping(self) -> None:
        return None

    # Clients

    async def register_client(self, client: Record) -> Record:
        key = _key(client["id"])
        if key in self.clients:
            raise ResourceAlreadyExistsException(detail="Client already exists", resource_id=key)

        record = {"id": buf(client["id"]), "secret": None, "name": None, "redirect_uri": None}
        record.update(CLIENT_DEFAULTS)
        record.update(self._client_fields(client))
        record["created_at"] = datetime.utcnow()
        self.clients[key] = record
        logger.debug(f"registerClient: {key}")
        return copy.deepcopy(record)

    async def get_client(self, client_id: Id) -> Optional[Record]:
        record = self.clients.get(_key(client_id))
        return copy.deepcopy(record) if record else None

    async def get_clients(self) -> List[Record]:
        return [copy.deepcopy(c) for c in self.clients.values()]

    async def update_client(self, client: Record) -> Record:
        key = _key(client["id"])
        record = self.clients.get(key)
        if record is None:
            raise ResourceNotFoundException(detail="Client not found", resource_id=key)
        record.update(self._client_fields(client))
        logger.debug(f"updateClient: {key}")
        return copy.deepcopy(record)

    async def remove_client(self, client_id: Id) -> None:
        key = _key(client_id)
        if self.clients.pop(key, None) is None:
            raise ResourceNotFoundException(detail="Client not found", resource_id=key)
        self.tokens = {
            h: t for h, t in self.tokens.items() if unbuf(t["client_id"]) != key
        }

    @staticmethod
    def _client_fields(client: Record) -> Record:
        fields = {f: client[f] for f in CLIENT_FIELDS if f in client}
        if client.get("hashed_secret"):
            fields["secret"] = buf(client["hashed_secret"])
        return fields

    # Accounts

    async def create_account(self, account: Record) -> Record:
        key = _key(account["uid"])
        if key in self.accounts:
            raise ResourceAlreadyExistsException(detail="Account already exists", resource_id=key)
        email = account.get("email")
        if email and any(a.get("email") == email for a in self.accounts.values()):
            raise ResourceAlreadyExistsException(detail="Email already registered", resource_id=email)

        record = {"uid": buf(account["uid"]), "email_verified": False, "locale": None}
        record.update({f: account[f] for f in ACCOUNT_FIELDS if f in account})
        record["created_at"] = datetime.utcnow()
        self.accounts[key] = record
        return copy.deepcopy(record)

    async def get_account(self, uid: Id) -> Optional[Record]:
        record = self.accounts.get(_key(uid))
        return copy.deepcopy(record) if record else None

    async def delete_account(self, uid: Id) -> None:
        key = _key(uid)
        if self.accounts.pop(key, None) is None:
            raise ResourceNotFoundException(detail="Account not found", resource_id=key)

        def kept(record):
            return unbuf(record["uid"]) != key

        self.session_tokens = {k: v for k, v in self.session_tokens.items() if kept(v)}
        self.devices = {k: v for k, v in self.devices.items() if kept(v)}
        self.tokens = {k: v for k, v in self.tokens.items() if kept(v)}

    # Sessions

    async def create_session_token(self, token_id: Id, uid: Id, data: Optional[Record] = None) -> Record:
        key = _key(token_id)
        if _key(uid) not in self.accounts:
            raise ResourceNotFoundException(detail="Account not found", resource_id=_key(uid))
        if key in self.session_tokens:
            raise ResourceAlreadyExistsException(detail="Session token already exists", resource_id=key)

        data = data or {}
        record = {f: data.get(f) for f in SESSION_FIELDS}
        record.update({"token_id": buf(token_id), "uid": buf(uid), "created_at": datetime.utcnow()})
        self.session_tokens[key] = record
        return copy.deepcopy(record)

    async def get_session_token(self, token_id: Id) -> Optional[Record]:
        record = self.session_tokens.get(_key(token_id))
        return copy.deepcopy(record) if record else None

    async def delete_session_token(self, token_id: Id) -> None:
        key = _key(token_id)
        if self.session_tokens.pop(key, None) is None:
            raise ResourceNotFoundException(detail="Session token not found", resource_id=key)
        self.devices = {
            k: v for k, v in self.devices.items() if unbuf(v["session_token_id"]) != key
        }

    # Tokens

    async def generate_token(self, vals: Record) -> Record:
        token = secrets.token_bytes(32)
        now = datetime.utcnow()
        record = {
            "token": encrypt.hash(token),
            "client_id": buf(vals["client_id"]),
            "uid": buf(vals["uid"]),
            "scope": vals.get("scope", ""),
            "created_at": now,
            "expires_at": now + self.token_ttl,
        }
        self.tokens[unbuf(record["token"])] = record

        issued = copy.deepcopy(record)
        issued["token"] = token
        return issued

    async def get_access_token(self, token: Id) -> Optional[Record]:
        record = self.tokens.get(unbuf(encrypt.hash(buf(token))))
        if record is None or record["expires_at"] <= datetime.utcnow():
            return None
        return copy.deepcopy(record)

    async def remove_access_token(self, token: Id) -> None:
        key = unbuf(encrypt.hash(buf(token)))
        if self.tokens.pop(key, None) is None:
            raise ResourceNotFoundException(detail="Access token not found")

    # Devices

    async def create_device(self, uid: Id, session_token_id: Id, device: Record) -> Record:
        session = self.session_tokens.get(_key(session_token_id))
        if session is None or unbuf(session["uid"]) != _key(uid):
            raise ResourceNotFoundException(detail="Session token not found", resource_id=_key(session_token_id))
        if any(unbuf(d["session_token_id"]) == _key(session_token_id) for d in self.devices.values()):
            raise ResourceAlreadyExistsException(
                detail="Session token already has a device", resource_id=_key(session_token_id)
            )

        record = {f: device.get(f) for f in DEVICE_FIELDS}
        record.update({
            "id": buf(device["id"]) if device.get("id") else secrets.token_bytes(16),
            "uid": buf(uid),
            "session_token_id": buf(session_token_id),
            "created_at": datetime.utcnow(),
        })
        self.devices[unbuf(record["id"])] = record
        return copy.deepcopy(record)

    async def get_devices(self, uid: Id) -> List[Record]:
        key = _key(uid)
        return [copy.deepcopy(d) for d in self.devices.values() if unbuf(d["uid"]) == key]

    async def update_device(self, uid: Id, device_id: Id, changes: Record) -> Record:
        record = self._device(uid, device_id)
        record.update({f: changes[f] for f in DEVICE_FIELDS if f in changes})
        return copy.deepcopy(record)

    async def delete_device(self, uid: Id, device_id: Id) -> None:
        self._device(uid, device_id)
        del self.devices[_key(device_id)]

    def _device(self, uid: Id, device_id: Id) -> Record:
        record = self.devices.get(_key(device_id))
        if record is None or unbuf(record["uid"]) != _key(uid):
            raise ResourceNotFoundException(detail="Device not found", resource_id=_key(device_id))
        return record
