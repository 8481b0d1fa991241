"""Database utilities - engine, session, migrations."""

from src.research_hub.core.db.engine import dispose_engine, get_engine
from src.research_hub.core.db.migrations import run_migrations_sync
from src.research_hub.core.db.session import get_session

__all__ = [
    # Engine
    "dispose_engine",
    "get_engine",
    # Session
    "get_session",
    # Migrations
    "run_migrations_sync",
]
