# oauth_store/application/use_cases/__init__.py
