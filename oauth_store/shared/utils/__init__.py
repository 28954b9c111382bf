# oauth_store/shared/utils/__init__.py
