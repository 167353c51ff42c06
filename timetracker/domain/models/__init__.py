"""
Domain models package.
"""

from .base import (
    BaseEntity,
    DomainException,
    ValidationError,
    NotFoundError,
    ConflictError,
    ForbiddenError,
    UnexpectedError,
    utc_now,
)
from .duration import calculate_duration_minutes
from .time_entry import TimeEntry, TimeEntryChanges
from .project import Project
from .authorization import (
    Role,
    Permission,
    ROLE_PERMISSIONS,
    AuthorizationMetadata,
    AuthorizationContext,
    AuthorizationResult,
)
from .query_scope import (
    SortField,
    SortOrder,
    TimeEntryFilters,
    QueryScope,
    ReportScope,
    TimeEntryListing,
    ScopedPage,
)
from .report import (
    DashboardSummary,
    DailyHours,
    ProjectHours,
    MonthlyHours,
    TimeSummaryRow,
)

__all__ = [
    "BaseEntity",
    "DomainException",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "ForbiddenError",
    "UnexpectedError",
    "utc_now",
    "calculate_duration_minutes",
    "TimeEntry",
    "TimeEntryChanges",
    "Project",
    "Role",
    "Permission",
    "ROLE_PERMISSIONS",
    "AuthorizationMetadata",
    "AuthorizationContext",
    "AuthorizationResult",
    "SortField",
    "SortOrder",
    "TimeEntryFilters",
    "QueryScope",
    "ReportScope",
    "TimeEntryListing",
    "ScopedPage",
    "DashboardSummary",
    "DailyHours",
    "ProjectHours",
    "MonthlyHours",
    "TimeSummaryRow",
]
