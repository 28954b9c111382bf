# oauth_store/shared/__init__.py
