"""
SQLAlchemy repository implementations.
"""

from .time_entry_repository import SQLAlchemyTimeEntryRepository
from .project_repository import SQLAlchemyProjectRepository
from .user_repository import SQLAlchemyUserRepository

__all__ = [
    "SQLAlchemyTimeEntryRepository",
    "SQLAlchemyProjectRepository",
    "SQLAlchemyUserRepository",
]
