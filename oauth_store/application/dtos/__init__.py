# oauth_store/application/dtos/__init__.py
