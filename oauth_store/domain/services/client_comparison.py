# oauth_store/domain/services/client_comparison.py

"""
Comparison between stored client records and configured descriptors.

Stores keep ids and the secret hash as bytes and some of them keep boolean
flags as 0/1, while descriptors carry hex strings and real booleans. Records
are first converted to the descriptor shape, then compared field by field.
"""

import logging
from typing import Any, Dict, Mapping

from oauth_store.shared.utils.encoding import unbuf

logger = logging.getLogger(__name__)

# Stored as 0 or 1 by the relational backends.
BOOLEAN_FIELDS = ("whitelisted", "can_grant")


def to_config_shape(client: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convert a stored client record to the shape of a configured descriptor.

    Args:
        client: Record as returned by ``get_client``

    Returns:
        Dict with ``hashed_secret`` instead of ``secret``, hex strings instead
        of bytes, strict booleans, and without ``created_at``
    """
    out = {}
    for key, value in client.items():
        if key == "created_at":
            continue
        elif key == "secret":
            out["hashed_secret"] = unbuf(value)
        elif key in BOOLEAN_FIELDS:
            out[key] = bool(value)
        elif not callable(value):
            out[key] = unbuf(value)
    return out


def clients_equal(client: Mapping[str, Any], other: Mapping[str, Any]) -> bool:
    """
    True when every field of ``client`` has the same value in ``other``.

    The comparison is one-sided on purpose: a field present only on
    ``other`` is not compared, so a descriptor that omits a field the store
    keeps is not considered divergent.
    """
    for prop in client:
        logger.debug(f"comparing {prop}")
        client_prop = unbuf(client[prop])
        other_prop = unbuf(other.get(prop))
        if client_prop != other_prop:
            logger.debug(f"Clients differ on {prop}: {client_prop!r} vs {other_prop!r}")
            return False
    return True
