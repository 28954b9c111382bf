# oauth_store/adapters/__init__.py
