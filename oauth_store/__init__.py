# oauth_store/__init__.py

"""
OAuth store: pluggable storage backends behind a lazily connected proxy,
with provisioning of the pre-defined clients from the configuration.
"""
