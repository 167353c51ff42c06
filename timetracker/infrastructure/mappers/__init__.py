"""
Mappers between domain entities and database models.
"""

from .time_entry_mapper import TimeEntryMapper, ProjectMapper, as_utc

__all__ = ["TimeEntryMapper", "ProjectMapper", "as_utc"]
