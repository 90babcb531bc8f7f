"""Bookshelf API.

Owner-scoped personal book library with an optional PDF attached to each book:
HTTP API, services, persistence and attachment storage.
"""

__version__ = "0.1.0"
