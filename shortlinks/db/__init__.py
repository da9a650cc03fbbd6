"""Database module for the short-link service."""
from shortlinks.db.base import (
    engine,
    get_engine,
    get_session,
    init_models,
    async_session_factory,
)
from shortlinks.db.session import get_db, db_transaction, transaction, db_dependency

__all__ = [
    "engine",
    "get_engine",
    "get_session",
    "init_models",
    "async_session_factory",
    "get_db",
    "db_transaction",
    "transaction",
    "db_dependency",
]
