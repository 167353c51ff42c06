"""
Database package.
"""

from .database import Base, engine, AsyncSessionLocal, get_db_session, create_all_tables

__all__ = ["Base", "engine", "AsyncSessionLocal", "get_db_session", "create_all_tables"]
