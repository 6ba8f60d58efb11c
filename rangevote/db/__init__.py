"""Database package."""
from rangevote.db.session import engine, SessionLocal, get_db, get_db_context
from rangevote.db.base import Base

__all__ = ["engine", "SessionLocal", "get_db", "get_db_context", "Base"]
