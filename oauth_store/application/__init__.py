# oauth_store/application/__init__.py
