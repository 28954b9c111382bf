# oauth_store/adapters/outbound/__init__.py
