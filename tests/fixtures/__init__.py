"""Shared pytest fixtures for the bookshelf tests."""

from .api import *  # noqa: F401,F403
from .auth import *  # noqa: F401,F403
from .core import *  # noqa: F401,F403
