"""
Persistence layer: declarative base, models, settings and async sessions.

Importing the package registers the models on ``Base.metadata``.
"""

from . import models  # noqa: F401
from .base import Base
from .config import Settings, get_settings
from .session import dispose_engine, get_async_session, get_engine, make_session_maker, session_scope

__all__ = [
    "Base",
    "Settings",
    "dispose_engine",
    "get_async_session",
    "get_engine",
    "get_settings",
    "make_session_maker",
    "session_scope",
]
