"""Tests for the service entry points."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from conftest import FakeConnector, client_descriptor
from oauth_store.adapters.outbound.persistence.memory_store import MemoryStore
from oauth_store.application.services.store import Store
from oauth_store.domain.exceptions import DatabaseOperationException
from oauth_store.main import cli, create_app, lifespan


def test_lbheartbeat(make_settings, backend):
    app = create_app(store=Store(make_settings(), connect=FakeConnector(backend)))
    with TestClient(app) as client:
        response = client.get("/__lbheartbeat__")
    assert response.status_code == 200
    assert response.json() == {}


def test_startup_provisions_clients_and_heartbeat_pings(make_settings, backend):
    store = Store(make_settings([client_descriptor()]), connect=FakeConnector(backend))
    app = create_app(store=store)

    with TestClient(app) as client:
        assert len(backend.registered) == 1
        response = client.get("/__heartbeat__")

    assert response.status_code == 200
    assert response.json() == {}


def test_heartbeat_reports_store_errors_as_unavailable(make_settings):
    driver = AsyncMock(spec=MemoryStore)
    driver.ping.side_effect = DatabaseOperationException(detail="database is gone")
    app = create_app(store=Store(make_settings(), connect=FakeConnector(driver)))

    with TestClient(app) as client:
        response = client.get("/__heartbeat__")

    assert response.status_code == 503
    assert response.json()["code"] == "BACKEND_UNAVAILABLE"


def test_unreachable_store_at_startup_is_retried_by_heartbeat(make_settings, backend):
    connector = FakeConnector(backend, failures=2)
    app = create_app(store=Store(make_settings(), connect=connector))

    with TestClient(app) as client:
        failed = client.get("/__heartbeat__")
        recovered = client.get("/__heartbeat__")

    assert failed.status_code == 503
    assert failed.json()["code"] == "BACKEND_UNAVAILABLE"
    assert recovered.status_code == 200
    assert connector.calls == 3


@pytest.mark.asyncio
async def test_plaintext_secret_exits_at_startup(make_settings, backend):
    store = Store(make_settings([client_descriptor(secret="foo")]), connect=FakeConnector(backend))
    app = create_app(store=store)

    with pytest.raises(SystemExit) as exc_info:
        async with lifespan(app):
            pass

    assert exc_info.value.code == 1
    assert backend.registered == []


def test_provisioning_command_exits_on_plaintext_secret(make_settings, backend):
    store = Store(make_settings([client_descriptor(secret="foo")]), connect=FakeConnector(backend))

    with patch("oauth_store.main.Store", return_value=store):
        with pytest.raises(SystemExit) as exc_info:
            cli()

    assert exc_info.value.code == 1


def test_provisioning_command_registers_clients(make_settings, backend):
    store = Store(make_settings([client_descriptor()]), connect=FakeConnector(backend))

    with patch("oauth_store.main.Store", return_value=store):
        cli()

    assert len(backend.registered) == 1
