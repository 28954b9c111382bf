# oauth_store/adapters/inbound/api/__init__.py
