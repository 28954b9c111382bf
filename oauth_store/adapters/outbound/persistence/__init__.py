# oauth_store/adapters/outbound/persistence/__init__.py
