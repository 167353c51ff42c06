"""
Time Entry domain model.
Represents a span of tracked work, either a running timer or a closed entry.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from timetracker.domain.models.base import BaseEntity, ValidationError, utc_now
from timetracker.domain.models.duration import calculate_duration_minutes


@dataclass
class TimeEntryChanges:
    """Partial update for a time entry. ``None`` means "leave unchanged"."""
    
    description: Optional[str] = None
    project_id: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    
    @property
    def touches_time_range(self) -> bool:
        return self.start_time is not None or self.end_time is not None
    
    @property
    def is_empty(self) -> bool:
        return (
            self.description is None
            and self.project_id is None
            and not self.touches_time_range
        )


@dataclass(eq=False)
class TimeEntry(BaseEntity):
    """
    Time entry entity.
    
    An entry is active (a running timer) exactly when it has neither an end
    time nor a duration. Closing it fills both and clears ``is_active``.
    """
    
    user_id: str = ""
    project_id: str = ""
    description: str = ""
    start_time: datetime = field(default_factory=utc_now)
    end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    is_active: bool = False
    
    @classmethod
    def start(
        cls,
        user_id: str,
        project_id: str,
        description: str = "",
        now: Optional[datetime] = None
    ) -> "TimeEntry":
        """Create a running timer starting at ``now``."""
        started_at = now or utc_now()
        entry = cls(
            user_id=user_id,
            project_id=project_id,
            description=description or "",
            start_time=started_at,
            end_time=None,
            duration_minutes=None,
            is_active=True,
            created_at=started_at,
            updated_at=started_at
        )
        entry.validate()
        return entry
    
    @classmethod
    def create_manual(
        cls,
        user_id: str,
        project_id: str,
        description: str,
        start_time: datetime,
        end_time: datetime,
        now: Optional[datetime] = None
    ) -> "TimeEntry":
        """Create an already closed entry for work done in the past."""
        if end_time <= start_time:
            raise ValidationError("end time must be after start time", "end_time")
        
        created_at = now or utc_now()
        entry = cls(
            user_id=user_id,
            project_id=project_id,
            description=description or "",
            start_time=start_time,
            end_time=end_time,
            duration_minutes=calculate_duration_minutes(start_time, end_time),
            is_active=False,
            created_at=created_at,
            updated_at=created_at
        )
        entry.validate()
        return entry
    
    def close(self, end_time: datetime) -> None:
        """Stop a running timer at ``end_time`` and record its duration."""
        if not self.is_active:
            raise ValidationError("Time entry is not running", "is_active")
        
        self.end_time = end_time
        self.duration_minutes = calculate_duration_minutes(self.start_time, end_time)
        self.is_active = False
        self.mark_as_updated(end_time)
    
    def apply_changes(self, changes: TimeEntryChanges, now: Optional[datetime] = None) -> None:
        """
        Apply a partial update.
        
        When either bound of the time range changes and both bounds are known,
        the duration is recomputed. Ordering of the bounds is not checked here.
        Setting an end time on a running timer closes it.
        """
        if changes.description is not None:
            self.description = changes.description
        if changes.project_id is not None:
            self.project_id = changes.project_id
        if changes.start_time is not None:
            self.start_time = changes.start_time
        if changes.end_time is not None:
            self.end_time = changes.end_time
            self.is_active = False
        
        if changes.touches_time_range and self.end_time is not None:
            self.duration_minutes = calculate_duration_minutes(self.start_time, self.end_time)
        
        self.mark_as_updated(now)
    
    def elapsed_minutes(self, now: Optional[datetime] = None) -> int:
        """Minutes tracked so far; the recorded duration once closed."""
        if self.duration_minutes is not None:
            return self.duration_minutes
        return calculate_duration_minutes(self.start_time, now or utc_now())
    
    @property
    def is_completed(self) -> bool:
        return self.duration_minutes is not None
    
    def validate(self) -> None:
        """Validate business rules."""
        if not self.user_id:
            raise ValidationError("User ID is required", "user_id")
        if not self.project_id:
            raise ValidationError("Project ID is required", "project_id")
        
        is_open = self.end_time is None and self.duration_minutes is None
        if self.is_active != is_open:
            raise ValidationError(
                "Active entries must have no end time or duration, closed entries must have both",
                "is_active"
            )
