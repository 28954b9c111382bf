# oauth_store/domain/models/__init__.py
