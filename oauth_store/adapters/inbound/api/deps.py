# oauth_store/adapters/inbound/api/deps.py

"""
Dependencies for injection into API endpoints.
"""

from fastapi import Request

from oauth_store.application.services.store import Store


def get_store(request: Request) -> Store:
    """The store created by the application lifespan."""
    return request.app.state.store
