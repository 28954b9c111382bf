# oauth_store/adapters/outbound/security/__init__.py
