"""Report service.
Aggregates completed time entries into dashboard and chart data.
"""

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Callable, Dict, List, Optional, Tuple

from timetracker.domain.models.base import ValidationError, utc_now
from timetracker.domain.models.query_scope import ReportScope
from timetracker.domain.models.report import (
    DailyHours,
    DashboardSummary,
    MonthlyHours,
    ProjectHours,
    TimeSummaryRow,
    minutes_to_hours,
)
from timetracker.domain.models.time_entry import TimeEntry
from timetracker.domain.repositories.project_repository import ProjectRepository
from timetracker.domain.repositories.time_entry_repository import TimeEntryRepository
from timetracker.domain.services.query_scope_service import start_of_day


logger = logging.getLogger(__name__)

DEFAULT_REPORT_DAYS = 14
DEFAULT_REPORT_MONTHS = 6


def week_start(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def count_working_days(first: date, last: date) -> int:
    """Monday to Friday days in ``[first, last]``."""
    total = 0
    day = first
    while day <= last:
        if day.weekday() < 5:
            total += 1
        day += timedelta(days=1)
    return total


def shift_month(day: date, months: int) -> date:
    """First day of the month ``months`` away from ``day``'s month."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def _sum_minutes(entries: List[TimeEntry]) -> int:
    return sum(entry.duration_minutes for entry in entries if entry.is_completed)


class ReportService:
    """
    Domain service for time reports.
    
    Only entries with a recorded duration count. Calendar boundaries (days,
    weeks starting on Sunday, months) are taken in the configured timezone.
    """

    def __init__(
        self,
        time_entry_repository: TimeEntryRepository,
        project_repository: ProjectRepository,
        tz: tzinfo = timezone.utc,
        clock: Callable[[], datetime] = utc_now
    ):
        self.time_entry_repository = time_entry_repository
        self.project_repository = project_repository
        self.tz = tz
        self.clock = clock

    def _today(self) -> Tuple[datetime, date]:
        now = self.clock()
        return now, now.astimezone(self.tz).date()

    def _local_day(self, moment: datetime) -> date:
        return moment.astimezone(self.tz).date()

    async def dashboard_summary(self, scope: ReportScope) -> DashboardSummary:
        """Headline numbers for the dashboard."""
        now, today = self._today()
        user_ids = scope.user_ids
        
        last_activity = await self.time_entry_repository.find_last_start_time(user_ids)
        
        month_start = start_of_day(today.replace(day=1), self.tz)
        month_entries = await self.time_entry_repository.find_completed_in_range(
            user_ids, month_start
        )
        month_minutes = _sum_minutes([e for e in month_entries if e.start_time <= now])
        
        current_week = week_start(today)
        this_week_start = start_of_day(current_week, self.tz)
        previous_week_start = start_of_day(current_week - timedelta(days=7), self.tz)
        
        week_entries = await self.time_entry_repository.find_completed_in_range(
            user_ids, this_week_start
        )
        previous_week_entries = await self.time_entry_repository.find_completed_in_range(
            user_ids, previous_week_start, this_week_start
        )
        
        weekly_hours = _sum_minutes(week_entries) / 60
        previous_week_hours = _sum_minutes(previous_week_entries) / 60
        if previous_week_hours > 0:
            trend = (weekly_hours - previous_week_hours) / previous_week_hours * 100
        else:
            trend = 0.0
        
        working_days = count_working_days(today.replace(day=1), today)
        total_hours = month_minutes / 60
        average_daily = total_hours / working_days if working_days > 0 else 0.0
        
        return DashboardSummary(
            last_activity=last_activity,
            total_minutes_this_month=month_minutes,
            total_hours_this_month=round(total_hours, 2),
            weekly_hours=round(weekly_hours, 2),
            previous_week_hours=round(previous_week_hours, 2),
            weekly_trend_pct=round(trend, 2),
            working_days=working_days,
            average_daily_hours=round(average_daily, 2)
        )

    async def daily_hours(self, scope: ReportScope, days: int = DEFAULT_REPORT_DAYS) -> List[DailyHours]:
        """Minutes per local day over the last ``days`` days, including today."""
        if days < 1:
            raise ValidationError("days must be at least 1", "days")
        
        _, today = self._today()
        since = start_of_day(today - timedelta(days=days - 1), self.tz)
        entries = await self.time_entry_repository.find_completed_in_range(scope.user_ids, since)
        
        minutes_by_day: Dict[date, int] = defaultdict(int)
        for entry in entries:
            minutes_by_day[self._local_day(entry.start_time)] += entry.duration_minutes or 0
        
        return [DailyHours(day=day, minutes=minutes) for day, minutes in sorted(minutes_by_day.items())]

    async def hours_by_project_current_month(self, scope: ReportScope) -> List[ProjectHours]:
        """Minutes per project since the first of the current month."""
        _, today = self._today()
        since = start_of_day(today.replace(day=1), self.tz)
        entries = await self.time_entry_repository.find_completed_in_range(scope.user_ids, since)
        
        minutes_by_project: Dict[str, int] = defaultdict(int)
        for entry in entries:
            minutes_by_project[entry.project_id] += entry.duration_minutes or 0
        
        projects = await self.project_repository.find_by_ids(list(minutes_by_project))
        rows = [
            ProjectHours(project_id=project_id, project_name=projects[project_id].name, minutes=minutes)
            for project_id, minutes in minutes_by_project.items()
            if project_id in projects
        ]
        rows.sort(key=lambda row: (-row.minutes, row.project_name))
        return rows

    async def monthly_billed_hours(
        self,
        scope: ReportScope,
        months: int = DEFAULT_REPORT_MONTHS
    ) -> List[MonthlyHours]:
        """Minutes per calendar month over the last ``months`` months, including this one."""
        if months < 1:
            raise ValidationError("months must be at least 1", "months")
        
        _, today = self._today()
        since = start_of_day(shift_month(today, -(months - 1)), self.tz)
        entries = await self.time_entry_repository.find_completed_in_range(scope.user_ids, since)
        
        minutes_by_month: Dict[str, int] = defaultdict(int)
        for entry in entries:
            minutes_by_month[self._local_day(entry.start_time).strftime("%Y-%m")] += entry.duration_minutes or 0
        
        return [MonthlyHours(month=month, minutes=minutes) for month, minutes in sorted(minutes_by_month.items())]

    async def time_summary(
        self,
        scope: ReportScope,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None
    ) -> List[TimeSummaryRow]:
        """Minutes and entry counts per client and project, busiest first."""
        if date_from and date_to and date_to < date_from:
            raise ValidationError("date_to must not be before date_from", "date_to")
        
        started_from = start_of_day(date_from, self.tz) if date_from else None
        started_before = start_of_day(date_to + timedelta(days=1), self.tz) if date_to else None
        entries = await self.time_entry_repository.find_completed_in_range(
            scope.user_ids, started_from, started_before
        )
        
        totals: Dict[str, List[int]] = defaultdict(lambda: [0, 0])
        for entry in entries:
            totals[entry.project_id][0] += entry.duration_minutes or 0
            totals[entry.project_id][1] += 1
        
        projects = await self.project_repository.find_by_ids(list(totals))
        rows = []
        for project_id, (minutes, count) in totals.items():
            project = projects.get(project_id)
            if project is None:
                logger.warning(f"Skipping {count} entries for unknown project {project_id}")
                continue
            rows.append(TimeSummaryRow(
                client_name=project.client_name,
                project_id=project_id,
                project_name=project.name,
                minutes=minutes,
                entry_count=count
            ))
        
        rows.sort(key=lambda row: (-row.minutes, row.client_name or "", row.project_name))
        logger.debug(f"Time summary for {len(scope.user_ids)} users: {len(rows)} rows, "
                     f"{minutes_to_hours(sum(row.minutes for row in rows))} hours")
        return rows
