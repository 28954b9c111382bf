# oauth_store/application/use_cases/client_reconciliation.py

"""
Provisioning of the pre-defined OAuth clients.

Each configured client is created when the store does not know it, updated
in full when the stored record differs, and left alone otherwise. Clients are
processed concurrently and independently: one failing client is logged and
does not stop the others. Nothing is ever deleted.
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Mapping, Sequence

from oauth_store.adapters.outbound.security import encrypt
from oauth_store.domain.exceptions import ConfigurationError
from oauth_store.domain.models.client_domain_model import ReconciliationOutcome
from oauth_store.domain.services.client_comparison import clients_equal, to_config_shape
from oauth_store.shared.utils.encoding import unbuf

logger = logging.getLogger(__name__)


def _dump(client: Mapping[str, Any]) -> str:
    return json.dumps(client, indent=2, sort_keys=True, default=str)


class ClientReconciler:
    """
    Makes the stored clients match the configured ones.

    Args:
        store: Anything with async get_client, register_client and
            update_client, normally the Store proxy
    """

    def __init__(self, store):
        self.store = store

    async def reconcile(self, clients: Sequence[Mapping[str, Any]]) -> List[ReconciliationOutcome]:
        """
        Provision ``clients``.

        Returns:
            One outcome per configured client, in configuration order

        Raises:
            ConfigurationError: If a client carries a plaintext secret; raised
                before any store call is made
        """
        if not clients:
            return []

        logger.debug(f"Loading pre-defined clients: {[c.get('id') for c in clients]}")
        self.check_secrets(clients)

        results = await asyncio.gather(
            *(self.reconcile_client(self.normalize(c)) for c in clients),
            return_exceptions=True,
        )

        outcomes = []
        for client, result in zip(clients, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.error(f"Error provisioning client {client.get('id')}: {result}")
                outcomes.append(ReconciliationOutcome.FAILED)
            else:
                outcomes.append(result)
        return outcomes

    @staticmethod
    def check_secrets(clients: Sequence[Mapping[str, Any]]) -> None:
        for client in clients:
            if client.get("secret"):
                error = ConfigurationError(
                    client_id=client.get("id"),
                    hashed_secret=unbuf(encrypt.hash(client["secret"])),
                )
                logger.error(str(error))
                raise error

    @staticmethod
    def normalize(client: Mapping[str, Any]) -> Dict[str, Any]:
        """Copy of ``client`` with strict boolean flags."""
        normalized = dict(client)
        normalized["whitelisted"] = bool(normalized.get("whitelisted"))
        normalized["can_grant"] = bool(normalized.get("can_grant"))
        return normalized

    async def reconcile_client(self, client: Dict[str, Any]) -> ReconciliationOutcome:
        client_id = client["id"]
        existing = await self.store.get_client(client_id)
        if not existing:
            await self.store.register_client(client)
            logger.info(f"Client {client_id} registered")
            return ReconciliationOutcome.CREATED

        existing = to_config_shape(existing)
        logger.info(f"Client {client_id} exists, comparing...")
        if clients_equal(client, existing):
            logger.info(f"Client {client_id} is the same, skipping...")
            return ReconciliationOutcome.UNCHANGED

        logger.warning(
            f"Client {client_id} differs, updating!\n"
            f"Before: {_dump(existing)}\nAfter: {_dump(client)}"
        )
        await self.store.update_client(client)
        return ReconciliationOutcome.UPDATED
