# oauth_store/domain/services/__init__.py
