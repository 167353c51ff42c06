"""
Domain services for time tracking.
"""

from .authorization_service import AuthorizationService
from .query_scope_service import ScopedQueryBuilder
from .timer_service import TimerService
from .report_service import ReportService

__all__ = [
    "AuthorizationService",
    "ScopedQueryBuilder",
    "TimerService",
    "ReportService",
]
