"""Tests for provisioning of the pre-defined clients."""

from unittest.mock import AsyncMock

import pytest

from conftest import CLIENT_ID, OTHER_CLIENT_ID, client_descriptor
from oauth_store.application.use_cases.client_reconciliation import ClientReconciler
from oauth_store.domain.exceptions import ConfigurationError, DatabaseOperationException
from oauth_store.domain.models.client_domain_model import ReconciliationOutcome

# sha256("foo")
FOO_SHA256 = "2c26b46b68ffc68ff99b453c1d30413413422d706483bfa0f98a5e886266e7ae"


def mock_store(existing=None):
    store = AsyncMock()
    store.get_client.return_value = existing
    return store


@pytest.mark.asyncio
async def test_absent_client_is_registered_once_with_full_descriptor():
    store = mock_store(existing=None)
    descriptor = client_descriptor()

    outcomes = await ClientReconciler(store).reconcile([descriptor])

    assert outcomes == [ReconciliationOutcome.CREATED]
    store.get_client.assert_awaited_once_with(CLIENT_ID)
    store.register_client.assert_awaited_once_with(descriptor)
    store.update_client.assert_not_awaited()


@pytest.mark.asyncio
async def test_identical_client_is_left_alone():
    stored = {
        "id": bytes.fromhex(CLIENT_ID),
        "secret": bytes.fromhex("deadbeef"),
        "whitelisted": 1,
        "can_grant": 0,
        "created_at": "2015-01-01",
    }
    store = mock_store(existing=stored)
    descriptor = {"id": CLIENT_ID, "hashed_secret": "deadbeef", "whitelisted": True, "can_grant": False}

    outcomes = await ClientReconciler(store).reconcile([descriptor])

    assert outcomes == [ReconciliationOutcome.UNCHANGED]
    store.register_client.assert_not_awaited()
    store.update_client.assert_not_awaited()


@pytest.mark.asyncio
async def test_divergent_client_is_updated_with_full_descriptor():
    stored = dict(client_descriptor(), id=bytes.fromhex(CLIENT_ID), created_at="2015-01-01")
    stored["secret"] = bytes.fromhex(stored.pop("hashed_secret"))
    store = mock_store(existing=stored)
    descriptor = client_descriptor(name="Renamed")

    outcomes = await ClientReconciler(store).reconcile([descriptor])

    assert outcomes == [ReconciliationOutcome.UPDATED]
    store.update_client.assert_awaited_once_with(descriptor)
    store.register_client.assert_not_awaited()


@pytest.mark.asyncio
async def test_flags_are_coerced_without_mutating_configuration():
    store = mock_store(existing=None)
    descriptor = {"id": CLIENT_ID, "name": "x", "redirect_uri": "https://example.com"}

    await ClientReconciler(store).reconcile([descriptor])

    registered = store.register_client.await_args.args[0]
    assert registered["whitelisted"] is False
    assert registered["can_grant"] is False
    assert "whitelisted" not in descriptor


@pytest.mark.asyncio
async def test_plaintext_secret_fails_before_any_store_call():
    store = mock_store(existing=None)
    clients = [client_descriptor(OTHER_CLIENT_ID), client_descriptor(secret="foo")]

    with pytest.raises(ConfigurationError) as exc_info:
        await ClientReconciler(store).reconcile(clients)

    assert exc_info.value.client_id == CLIENT_ID
    assert exc_info.value.hashed_secret == FOO_SHA256
    assert FOO_SHA256 in str(exc_info.value)
    store.get_client.assert_not_awaited()
    store.register_client.assert_not_awaited()


@pytest.mark.asyncio
async def test_failing_client_does_not_block_the_others():
    store = AsyncMock()

    async def get_client(client_id):
        if client_id == CLIENT_ID:
            raise DatabaseOperationException(detail="lookup failed")
        return None

    store.get_client.side_effect = get_client
    clients = [client_descriptor(CLIENT_ID), client_descriptor(OTHER_CLIENT_ID)]

    outcomes = await ClientReconciler(store).reconcile(clients)

    assert outcomes == [ReconciliationOutcome.FAILED, ReconciliationOutcome.CREATED]
    store.register_client.assert_awaited_once_with(client_descriptor(OTHER_CLIENT_ID))


@pytest.mark.asyncio
async def test_empty_configuration_does_nothing():
    store = mock_store()
    assert await ClientReconciler(store).reconcile([]) == []
    store.get_client.assert_not_awaited()


@pytest.mark.asyncio
async def test_reconciliation_is_idempotent(backend):
    reconciler = ClientReconciler(backend)
    clients = [client_descriptor(CLIENT_ID), client_descriptor(OTHER_CLIENT_ID, trusted=False)]

    first = await reconciler.reconcile(clients)
    second = await reconciler.reconcile(clients)

    assert first == [ReconciliationOutcome.CREATED, ReconciliationOutcome.CREATED]
    assert second == [ReconciliationOutcome.UNCHANGED, ReconciliationOutcome.UNCHANGED]
    assert len(backend.registered) == 2
    assert backend.updated == []


@pytest.mark.asyncio
async def test_configuration_change_updates_the_stored_client(backend):
    reconciler = ClientReconciler(backend)
    await reconciler.reconcile([client_descriptor()])

    outcomes = await reconciler.reconcile([client_descriptor(redirect_uri="https://example.com/new")])

    assert outcomes == [ReconciliationOutcome.UPDATED]
    stored = await backend.get_client(CLIENT_ID)
    assert stored["redirect_uri"] == "https://example.com/new"
