"""
Report DTOs for the application layer.
"""

from typing import Optional, List
from datetime import date, datetime
from pydantic import Field, field_validator

from timetracker.domain.models.report import (
    DailyHours,
    DashboardSummary,
    MonthlyHours,
    ProjectHours,
    TimeSummaryRow,
)
from .base_dto import BaseDTO, RequestDTO


class ReportRequestDTO(RequestDTO):
    """Common report parameters."""
    
    users: Optional[List[str]] = Field(default=None, description="User IDs to report on; the caller when omitted")
    
    @field_validator('users', mode='before')
    @classmethod
    def split_users(cls, v):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v


class DailyHoursRequestDTO(ReportRequestDTO):
    days: Optional[int] = Field(default=None, description="Number of days including today")


class MonthlyHoursRequestDTO(ReportRequestDTO):
    months: Optional[int] = Field(default=None, description="Number of months including this one")


class TimeSummaryRequestDTO(ReportRequestDTO):
    date_from: Optional[date] = Field(default=None, description="First day")
    date_to: Optional[date] = Field(default=None, description="Last day")


class DashboardSummaryResponseDTO(BaseDTO):
    """Dashboard headline numbers."""
    
    last_activity: Optional[datetime] = None
    total_minutes_this_month: int
    total_hours_this_month: float
    weekly_hours: float
    previous_week_hours: float
    weekly_trend_pct: float
    working_days: int
    average_daily_hours: float
    
    @classmethod
    def from_summary(cls, summary: DashboardSummary) -> "DashboardSummaryResponseDTO":
        return cls(
            last_activity=summary.last_activity,
            total_minutes_this_month=summary.total_minutes_this_month,
            total_hours_this_month=summary.total_hours_this_month,
            weekly_hours=summary.weekly_hours,
            previous_week_hours=summary.previous_week_hours,
            weekly_trend_pct=summary.weekly_trend_pct,
            working_days=summary.working_days,
            average_daily_hours=summary.average_daily_hours
        )


class DailyHoursDTO(BaseDTO):
    day: date
    minutes: int
    hours: float
    
    @classmethod
    def from_row(cls, row: DailyHours) -> "DailyHoursDTO":
        return cls(day=row.day, minutes=row.minutes, hours=row.hours)


class ProjectHoursDTO(BaseDTO):
    project_id: str
    project_name: str
    minutes: int
    hours: float
    
    @classmethod
    def from_row(cls, row: ProjectHours) -> "ProjectHoursDTO":
        return cls(project_id=row.project_id, project_name=row.project_name, minutes=row.minutes, hours=row.hours)


class MonthlyHoursDTO(BaseDTO):
    month: str
    minutes: int
    hours: float
    
    @classmethod
    def from_row(cls, row: MonthlyHours) -> "MonthlyHoursDTO":
        return cls(month=row.month, minutes=row.minutes, hours=row.hours)


class TimeSummaryRowDTO(BaseDTO):
    client_name: Optional[str] = None
    project_id: str
    project_name: str
    minutes: int
    hours: float
    entry_count: int
    
    @classmethod
    def from_row(cls, row: TimeSummaryRow) -> "TimeSummaryRowDTO":
        return cls(
            client_name=row.client_name,
            project_id=row.project_id,
            project_name=row.project_name,
            minutes=row.minutes,
            hours=row.hours,
            entry_count=row.entry_count
        )
