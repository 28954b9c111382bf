# oauth_store/adapters/inbound/api/router.py

from fastapi import APIRouter
from oauth_store.adapters.inbound.api import heartbeat

api_router = APIRouter()

api_router.include_router(heartbeat.router)
