"""
Time Entry DTOs for the application layer.
Data Transfer Objects for time tracking operations.
"""

from typing import Optional, List
from datetime import datetime
from pydantic import Field, field_validator

from timetracker.domain.models.time_entry import TimeEntry, TimeEntryChanges
from timetracker.domain.models.query_scope import TimeEntryFilters, TimeEntryListing
from .base_dto import RequestDTO, ResponseDTO, TimestampMixin, ListResponseDTO, ensure_utc


# Request DTOs
class StartTimerRequestDTO(RequestDTO):
    """DTO for starting a timer."""
    
    project_id: str = Field(min_length=1, description="Project ID")
    description: str = Field(default="", max_length=1000, description="Work description")
    
    @field_validator('description', mode='before')
    @classmethod
    def default_description(cls, v):
        return v if v is not None else ""


class TimerActionRequestDTO(RequestDTO):
    """DTO for acting on the running timer."""
    
    action: str = Field(description="Either 'stop' or 'pause'")
    entry_id: Optional[str] = Field(default=None, description="Narrow the action to one entry")


class CreateManualEntryRequestDTO(RequestDTO):
    """DTO for manual time entry creation."""
    
    project_id: str = Field(min_length=1, description="Project ID")
    description: str = Field(default="", max_length=1000, description="Work description")
    start_time: datetime = Field(description="Start timestamp")
    end_time: datetime = Field(description="End timestamp")
    
    @field_validator('start_time', 'end_time')
    @classmethod
    def normalize_timezone(cls, v):
        return ensure_utc(v)


class UpdateTimeEntryRequestDTO(RequestDTO):
    """DTO for time entry update requests. Omitted fields are left unchanged."""
    
    description: Optional[str] = Field(default=None, max_length=1000, description="Work description")
    project_id: Optional[str] = Field(default=None, min_length=1, description="Project ID")
    start_time: Optional[datetime] = Field(default=None, description="Start timestamp")
    end_time: Optional[datetime] = Field(default=None, description="End timestamp")
    
    @field_validator('start_time', 'end_time')
    @classmethod
    def normalize_timezone(cls, v):
        return ensure_utc(v)
    
    def to_changes(self) -> TimeEntryChanges:
        return TimeEntryChanges(
            description=self.description,
            project_id=self.project_id,
            start_time=self.start_time,
            end_time=self.end_time
        )


class ListTimeEntriesRequestDTO(RequestDTO):
    """DTO for listing time entries. Values are passed through loosely and normalized by the scope builder."""
    
    users: Optional[str] = Field(default=None, description="'all' or comma-separated user IDs")
    projects: Optional[str] = Field(default=None, description="'all' or comma-separated project names")
    search: Optional[str] = Field(default=None, description="Search in description, project and client names")
    date_from: Optional[str] = Field(default=None, description="First day, YYYY-MM-DD")
    date_to: Optional[str] = Field(default=None, description="Last day, YYYY-MM-DD")
    sort_by: Optional[str] = Field(default=None, description="date, duration or project")
    sort_order: Optional[str] = Field(default=None, description="asc or desc")
    page: Optional[str] = Field(default=None, description="Page number")
    limit: Optional[str] = Field(default=None, description="Items per page")
    
    def to_filters(self) -> TimeEntryFilters:
        return TimeEntryFilters(
            users=self.users,
            projects=self.projects,
            search=self.search,
            date_from=self.date_from,
            date_to=self.date_to,
            sort_by=self.sort_by,
            sort_order=self.sort_order,
            page=self.page,
            limit=self.limit
        )


# Response DTOs
class TimeEntryResponseDTO(ResponseDTO, TimestampMixin):
    """DTO for time entry response."""
    
    user_id: str = Field(description="User ID")
    project_id: str = Field(description="Project ID")
    description: str = Field(description="Work description")
    start_time: datetime = Field(description="Start timestamp")
    end_time: Optional[datetime] = Field(default=None, description="End timestamp")
    duration_minutes: Optional[int] = Field(default=None, description="Duration in minutes")
    is_active: bool = Field(description="Whether the timer is running")
    
    @classmethod
    def from_entity(cls, entry: TimeEntry) -> "TimeEntryResponseDTO":
        return cls(
            id=entry.id,
            user_id=entry.user_id,
            project_id=entry.project_id,
            description=entry.description,
            start_time=entry.start_time,
            end_time=entry.end_time,
            duration_minutes=entry.duration_minutes,
            is_active=entry.is_active,
            created_at=entry.created_at,
            updated_at=entry.updated_at
        )


class TimeEntryListItemDTO(TimeEntryResponseDTO):
    """DTO for time entries in listings, with project and client names."""
    
    project_name: Optional[str] = Field(default=None, description="Project name")
    client_name: Optional[str] = Field(default=None, description="Client name")
    
    @classmethod
    def from_listing(cls, listing: TimeEntryListing) -> "TimeEntryListItemDTO":
        data = TimeEntryResponseDTO.from_entity(listing.entry).model_dump()
        return cls(**data, project_name=listing.project_name, client_name=listing.client_name)


class TimeEntryListResponseDTO(ListResponseDTO[TimeEntryListItemDTO]):
    """Page of time entries."""
    pass


class ActiveTimerResponseDTO(ResponseDTO):
    """DTO for the running timer, or its absence."""
    
    is_active: bool = Field(description="Whether a timer is running")
    project_id: Optional[str] = Field(default=None, description="Project ID")
    project_name: Optional[str] = Field(default=None, description="Project name")
    client_name: Optional[str] = Field(default=None, description="Client name")
    description: Optional[str] = Field(default=None, description="Work description")
    start_time: Optional[datetime] = Field(default=None, description="Timer start time")
    elapsed_minutes: Optional[int] = Field(default=None, description="Minutes elapsed")
    
    @classmethod
    def idle(cls) -> "ActiveTimerResponseDTO":
        return cls(is_active=False)


class TimerActionResponseDTO(ResponseDTO):
    """DTO returned after stopping or pausing the timer."""
    
    action: str = Field(description="'stopped' or 'paused'")
    duration_minutes: Optional[int] = Field(default=None, description="Recorded duration")
    entry: TimeEntryResponseDTO = Field(description="The closed entry")


class DeleteTimeEntryResponseDTO(ResponseDTO):
    deleted: bool = Field(description="Whether an entry was removed")
