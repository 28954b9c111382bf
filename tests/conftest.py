"""Pytest configuration and fixtures."""

import asyncio
import os

import pytest

# Defaults for the module-level settings, before the package is imported
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DB_DRIVER", "memory")
os.environ.setdefault("CLIENTS", "[]")

from oauth_store.adapters.configuration.config import Settings  # noqa: E402
from oauth_store.adapters.outbound.persistence.memory_store import MemoryStore  # noqa: E402
from oauth_store.domain.exceptions import BackendConnectionError  # noqa: E402

CLIENT_ID = "dcdb5ae7add825d2"
OTHER_CLIENT_ID = "98e6508e88680e1a"
HASHED_SECRET = "deadbeef" * 8


class RecordingStore(MemoryStore):
    """MemoryStore that records the client calls it receives."""

    def __init__(self):
        super().__init__()
        self.lookups = []
        self.registered = []
        self.updated = []

    async def get_client(self, client_id):
        self.lookups.append(client_id)
        return await super().get_client(client_id)

    async def register_client(self, client):
        self.registered.append(client)
        return await super().register_client(client)

    async def update_client(self, client):
        self.updated.append(client)
        return await super().update_client(client)


class FakeConnector:
    """Connect function handing out a fixed driver, failing the first ``failures`` calls."""

    def __init__(self, driver, failures=0):
        self.driver = driver
        self.failures = failures
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        await asyncio.sleep(0)
        if self.failures:
            self.failures -= 1
            raise BackendConnectionError(detail="backend is down")
        return self.driver


def client_descriptor(client_id=CLIENT_ID, **overrides):
    descriptor = {
        "id": client_id,
        "hashed_secret": HASHED_SECRET,
        "name": "Firefox Accounts",
        "image_uri": "https://example.com/logo.png",
        "redirect_uri": "https://example.com/oauth",
        "whitelisted": True,
        "can_grant": False,
        "trusted": True,
    }
    descriptor.update(overrides)
    return descriptor


@pytest.fixture
def backend():
    return RecordingStore()


@pytest.fixture
def make_settings():
    def _make(clients=(), **overrides):
        return Settings(CLIENTS=list(clients), **overrides)
    return _make
