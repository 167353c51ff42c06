"""
Report read models produced by the report service.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


def minutes_to_hours(minutes: int) -> float:
    """Hours rounded to two decimals."""
    return round(minutes / 60, 2)


@dataclass(frozen=True)
class DashboardSummary:
    last_activity: Optional[datetime]
    total_minutes_this_month: int
    total_hours_this_month: float
    weekly_hours: float
    previous_week_hours: float
    weekly_trend_pct: float
    working_days: int
    average_daily_hours: float


@dataclass(frozen=True)
class DailyHours:
    day: date
    minutes: int
    
    @property
    def hours(self) -> float:
        return minutes_to_hours(self.minutes)


@dataclass(frozen=True)
class ProjectHours:
    project_id: str
    project_name: str
    minutes: int
    
    @property
    def hours(self) -> float:
        return minutes_to_hours(self.minutes)


@dataclass(frozen=True)
class MonthlyHours:
    """Minutes tracked in a calendar month, ``month`` formatted ``YYYY-MM``."""
    month: str
    minutes: int
    
    @property
    def hours(self) -> float:
        return minutes_to_hours(self.minutes)


@dataclass(frozen=True)
class TimeSummaryRow:
    client_name: Optional[str]
    project_id: str
    project_name: str
    minutes: int
    entry_count: int
    
    @property
    def hours(self) -> float:
        return minutes_to_hours(self.minutes)
