"""
Query scope models.
Raw listing filters as received from a caller, and the authorized, normalized
scope the repositories execute.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, FrozenSet, List, Optional, Sequence, Tuple, Union

from timetracker.domain.models.time_entry import TimeEntry


class SortField(str, Enum):
    DATE = "date"
    DURATION = "duration"
    PROJECT = "project"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


ALL = "all"


@dataclass
class TimeEntryFilters:
    """
    Unvalidated listing filters.
    
    ``users`` and ``projects`` accept ``"all"``, a comma-separated string or a
    sequence. Dates accept ``YYYY-MM-DD`` strings or ``date`` objects.
    ``page`` and ``limit`` may be anything; invalid values fall back to defaults.
    """
    
    users: Optional[Union[str, Sequence[str]]] = None
    projects: Optional[Union[str, Sequence[str]]] = None
    search: Optional[str] = None
    date_from: Optional[Union[str, date]] = None
    date_to: Optional[Union[str, date]] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    page: Any = None
    limit: Any = None


@dataclass(frozen=True)
class QueryScope:
    """
    Authorized listing scope.
    
    ``user_ids`` of ``None`` means every user, ``project_names`` of ``None``
    means every project. ``started_from`` / ``started_before`` are the UTC
    bounds of the requested calendar days.
    """
    
    user_ids: Optional[FrozenSet[str]]
    project_names: Optional[Tuple[str, ...]] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    started_from: Optional[datetime] = None
    started_before: Optional[datetime] = None
    search: Optional[str] = None
    sort_by: SortField = SortField.DATE
    sort_order: SortOrder = SortOrder.DESC
    page: int = 1
    limit: int = 10
    
    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
    
    @property
    def is_unrestricted(self) -> bool:
        return self.user_ids is None


@dataclass(frozen=True)
class ReportScope:
    """Users whose entries a report aggregates."""
    
    user_ids: FrozenSet[str]


@dataclass(frozen=True)
class TimeEntryListing:
    """A time entry joined with its project and client names."""
    
    entry: TimeEntry
    project_name: Optional[str] = None
    client_name: Optional[str] = None


@dataclass(frozen=True)
class ScopedPage:
    """One page of listing rows plus the total match count."""
    
    items: List[TimeEntryListing]
    total: int
    page: int
    limit: int
    
    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return (self.total + self.limit - 1) // self.limit
