# oauth_store/adapters/inbound/api/heartbeat.py

"""
Health check endpoints for load balancers and monitoring.
"""

import logging
from fastapi import APIRouter, Depends

from oauth_store.adapters.inbound.api.deps import get_store
from oauth_store.application.services.store import Store
from oauth_store.domain.exceptions import BackendConnectionError, StoreException

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Heartbeat"], include_in_schema=False)


@router.get("/__lbheartbeat__")
async def lbheartbeat():
    """Process is up; does not touch the store."""
    return {}


@router.get("/__heartbeat__")
async def heartbeat(store: Store = Depends(get_store)):
    """
    Pings the store backend.

    Any store error means the backend is unavailable and is answered
    with 503.
    """
    try:
        await store.ping()
    except BackendConnectionError:
        raise
    except StoreException as e:
        logger.warning(f"Heartbeat failed: {e}")
        raise BackendConnectionError(detail="Store backend is unhealthy", original_error=e)
    return {}
