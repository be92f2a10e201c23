"""Database package."""

from .db import create_db_engine, init_db, default_database_url, session_scope
from .models import Base, SessionRow
from .store import SessionStore, SqlSessionStore

__all__ = [
    "create_db_engine",
    "init_db",
    "default_database_url",
    "session_scope",
    "Base",
    "SessionRow",
    "SessionStore",
    "SqlSessionStore",
]
