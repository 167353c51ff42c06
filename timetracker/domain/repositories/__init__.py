"""
Repository interfaces (ports) for the time tracking domain.
"""

from .time_entry_repository import TimeEntryRepository
from .project_repository import ProjectRepository
from .user_repository import UserRepository

__all__ = [
    "TimeEntryRepository",
    "ProjectRepository",
    "UserRepository",
]
