# oauth_store/adapters/configuration/__init__.py
