"""
Time entry mapper for converting between domain entities and database models.
"""

from datetime import datetime, timezone
from typing import Optional

from timetracker.domain.models.project import Project
from timetracker.domain.models.time_entry import TimeEntry
from timetracker.infrastructure.db.models import ProjectModel, TimeEntryModel


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; stored values are always UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TimeEntryMapper:
    """Maps between TimeEntry domain entity and TimeEntryModel database model."""
    
    def domain_to_model(self, time_entry: TimeEntry) -> TimeEntryModel:
        """Convert TimeEntry domain entity to TimeEntryModel."""
        return TimeEntryModel(
            id=time_entry.id,
            user_id=time_entry.user_id,
            project_id=time_entry.project_id,
            description=time_entry.description,
            start_time=time_entry.start_time,
            end_time=time_entry.end_time,
            duration_minutes=time_entry.duration_minutes,
            is_active=time_entry.is_active,
            created_at=time_entry.created_at,
            updated_at=time_entry.updated_at
        )
    
    def update_model(self, model: TimeEntryModel, time_entry: TimeEntry) -> TimeEntryModel:
        """Copy mutable fields from the entity onto an existing model."""
        model.project_id = time_entry.project_id
        model.description = time_entry.description
        model.start_time = time_entry.start_time
        model.end_time = time_entry.end_time
        model.duration_minutes = time_entry.duration_minutes
        model.is_active = time_entry.is_active
        model.updated_at = time_entry.updated_at
        return model
    
    def model_to_domain(self, model: TimeEntryModel) -> TimeEntry:
        """Convert TimeEntryModel to TimeEntry domain entity."""
        return TimeEntry(
            id=model.id,
            user_id=model.user_id,
            project_id=model.project_id,
            description=model.description or "",
            start_time=as_utc(model.start_time),
            end_time=as_utc(model.end_time),
            duration_minutes=model.duration_minutes,
            is_active=bool(model.is_active),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at)
        )


class ProjectMapper:
    """Maps ProjectModel rows to the Project read model."""
    
    def model_to_domain(self, model: ProjectModel, client_name: Optional[str] = None) -> Project:
        return Project(
            id=model.id,
            name=model.name,
            client_id=model.client_id,
            client_name=client_name,
            active=bool(model.active) if model.active is not None else True
        )
