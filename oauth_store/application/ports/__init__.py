# oauth_store/application/ports/__init__.py
