"""Database package for Lifelog."""

from lifelog.db.base import Base
from lifelog.db.session import async_session_maker, engine, get_db

__all__ = [
    "Base",
    "async_session_maker",
    "engine",
    "get_db",
]
