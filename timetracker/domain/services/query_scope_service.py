"""Scoped query builder.
Turns raw listing filters into an authorized, normalized QueryScope.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any, List, Optional, Sequence, Tuple, Union

from timetracker.domain.models.authorization import AuthorizationContext
from timetracker.domain.models.base import ForbiddenError, ValidationError
from timetracker.domain.models.query_scope import (
    ALL,
    QueryScope,
    ReportScope,
    SortField,
    SortOrder,
    TimeEntryFilters,
)
from timetracker.domain.services.authorization_service import AuthorizationService


logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
DEFAULT_MAX_LIMIT = 100
MAX_PAGE = 100_000


def split_values(value: Optional[Union[str, Sequence[str]]]) -> List[str]:
    """Split a comma-separated string (or sequence) into trimmed, non-empty items."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [str(item).strip() for item in items if item is not None and str(item).strip()]


def parse_positive_int(value: Any, default: int) -> int:
    """Positive integer from loose input, ``default`` when absent or invalid."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        try:
            number = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return default
    return number if number >= 1 else default


def parse_calendar_date(value: Optional[Union[str, date]], field: str) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` date. Blank means no bound."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid date '{text}', expected YYYY-MM-DD", field)


def start_of_day(day: date, tz: tzinfo) -> datetime:
    """Local midnight of ``day`` expressed in UTC."""
    return datetime.combine(day, time.min, tzinfo=tz).astimezone(timezone.utc)


class ScopedQueryBuilder:
    """
    Domain service that builds listing and report scopes.
    
    Authorization is always checked before a scope is produced; a denial is
    raised as ForbiddenError carrying the authorization reason.
    """

    def __init__(
        self,
        authorization_service: AuthorizationService,
        tz: tzinfo = timezone.utc,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = DEFAULT_MAX_LIMIT
    ):
        self.authorization_service = authorization_service
        self.tz = tz
        self.default_limit = default_limit
        self.max_limit = max_limit

    def build(self, context: AuthorizationContext, filters: TimeEntryFilters) -> QueryScope:
        """Authorize and normalize listing filters."""
        user_ids = self._resolve_users(context, filters.users)
        project_names = self._resolve_projects(filters.projects)
        
        date_from = parse_calendar_date(filters.date_from, "date_from")
        date_to = parse_calendar_date(filters.date_to, "date_to")
        started_from = start_of_day(date_from, self.tz) if date_from else None
        started_before = start_of_day(date_to + timedelta(days=1), self.tz) if date_to else None
        
        search = (filters.search or "").strip() or None
        
        limit = min(parse_positive_int(filters.limit, self.default_limit), self.max_limit)
        
        return QueryScope(
            user_ids=user_ids,
            project_names=project_names,
            date_from=date_from,
            date_to=date_to,
            started_from=started_from,
            started_before=started_before,
            search=search,
            sort_by=self._parse_sort_field(filters.sort_by),
            sort_order=self._parse_sort_order(filters.sort_order),
            page=min(parse_positive_int(filters.page, DEFAULT_PAGE), MAX_PAGE),
            limit=limit
        )

    def build_report_scope(
        self,
        context: AuthorizationContext,
        target_user_ids: Optional[Sequence[str]] = None
    ) -> ReportScope:
        """Authorize a report over ``target_user_ids`` (the principal by default)."""
        targets = split_values(target_user_ids)
        if any(target.lower() == ALL for target in targets):
            raise ValidationError("Reports need explicit user IDs; 'all' is only supported for listings", "users")
        
        result = self.authorization_service.can_view_reports(context, targets)
        if not result.authorized:
            raise ForbiddenError(result.reason)
        
        return ReportScope(user_ids=frozenset(targets or [context.principal_id]))

    def _resolve_users(
        self,
        context: AuthorizationContext,
        users: Optional[Union[str, Sequence[str]]]
    ) -> Optional[frozenset]:
        if isinstance(users, str) and users.strip().lower() == ALL:
            result = self.authorization_service.can_view_all_timesheets(context)
            if not result.authorized:
                raise ForbiddenError(result.reason)
            return None
        
        requested = split_values(users)
        if not requested:
            return frozenset([context.principal_id])
        
        others = [user_id for user_id in requested if user_id != context.principal_id]
        if others:
            self._authorize_other_users(context, others)
        
        return frozenset(requested)

    def _authorize_other_users(self, context: AuthorizationContext, user_ids: List[str]) -> None:
        if self.authorization_service.can_view_all_timesheets(context).authorized:
            return
        
        for user_id in user_ids:
            result = self.authorization_service.can_view_user_timesheets(context, user_id)
            if not result.authorized:
                raise ForbiddenError(result.reason)

    def _resolve_projects(
        self,
        projects: Optional[Union[str, Sequence[str]]]
    ) -> Optional[Tuple[str, ...]]:
        if isinstance(projects, str) and projects.strip().lower() == ALL:
            return None
        names = split_values(projects)
        return tuple(names) if names else None

    @staticmethod
    def _parse_sort_field(value: Optional[str]) -> SortField:
        try:
            return SortField((value or "").lower())
        except ValueError:
            return SortField.DATE

    @staticmethod
    def _parse_sort_order(value: Optional[str]) -> SortOrder:
        if (value or "").lower() == SortOrder.ASC.value:
            return SortOrder.ASC
        return SortOrder.DESC
