# oauth_store/adapters/inbound/__init__.py
