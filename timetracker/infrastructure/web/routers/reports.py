"""
Reports router.
Dashboard and chart data for the caller or for users they may report on.
"""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Query

from timetracker.application.dto.report_dto import (
    ReportRequestDTO,
    DailyHoursRequestDTO,
    MonthlyHoursRequestDTO,
    TimeSummaryRequestDTO,
    DashboardSummaryResponseDTO,
    DailyHoursDTO,
    ProjectHoursDTO,
    MonthlyHoursDTO,
    TimeSummaryRowDTO,
)
from timetracker.application.use_cases.report_use_cases import (
    GetDashboardSummaryUseCase,
    GetDailyHoursUseCase,
    GetHoursByProjectUseCase,
    GetMonthlyHoursUseCase,
    GetTimeSummaryUseCase,
)
from timetracker.config import get_settings
from timetracker.infrastructure.auth.dependencies import (
    CurrentContext,
    QueryBuilderDep,
    ReportServiceDep,
)
from timetracker.infrastructure.web.middleware.error_handler import raise_for_result


router = APIRouter()

USERS_QUERY = Query(None, description="Comma-separated user IDs; defaults to the caller")


@router.get("/dashboard", response_model=DashboardSummaryResponseDTO)
async def dashboard_summary(
    context: CurrentContext,
    report_service: ReportServiceDep,
    query_builder: QueryBuilderDep,
    users: Optional[str] = USERS_QUERY
):
    """Last activity, month and week totals, weekly trend and daily average."""
    use_case = GetDashboardSummaryUseCase(report_service, query_builder)
    use_case.set_authorization_context(context)
    return raise_for_result(await use_case.execute(ReportRequestDTO(users=users)))


@router.get("/daily", response_model=List[DailyHoursDTO])
async def daily_hours(
    context: CurrentContext,
    report_service: ReportServiceDep,
    query_builder: QueryBuilderDep,
    users: Optional[str] = USERS_QUERY,
    days: Optional[int] = Query(None, description="Number of days including today")
):
    """Hours per day for the last ``days`` days."""
    use_case = GetDailyHoursUseCase(
        report_service, query_builder, default_days=get_settings().default_report_days
    )
    use_case.set_authorization_context(context)
    return raise_for_result(await use_case.execute(DailyHoursRequestDTO(users=users, days=days)))


@router.get("/by-project", response_model=List[ProjectHoursDTO])
async def hours_by_project(
    context: CurrentContext,
    report_service: ReportServiceDep,
    query_builder: QueryBuilderDep,
    users: Optional[str] = USERS_QUERY
):
    """Hours per project for the current month."""
    use_case = GetHoursByProjectUseCase(report_service, query_builder)
    use_case.set_authorization_context(context)
    return raise_for_result(await use_case.execute(ReportRequestDTO(users=users)))


@router.get("/monthly", response_model=List[MonthlyHoursDTO])
async def monthly_hours(
    context: CurrentContext,
    report_service: ReportServiceDep,
    query_builder: QueryBuilderDep,
    users: Optional[str] = USERS_QUERY,
    months: Optional[int] = Query(None, description="Number of months including this one")
):
    """Hours per month for the last ``months`` months."""
    use_case = GetMonthlyHoursUseCase(
        report_service, query_builder, default_months=get_settings().default_report_months
    )
    use_case.set_authorization_context(context)
    return raise_for_result(await use_case.execute(MonthlyHoursRequestDTO(users=users, months=months)))


@router.get("/summary", response_model=List[TimeSummaryRowDTO])
async def time_summary(
    context: CurrentContext,
    report_service: ReportServiceDep,
    query_builder: QueryBuilderDep,
    users: Optional[str] = USERS_QUERY,
    date_from: Optional[date] = Query(None, description="First day (YYYY-MM-DD)"),
    date_to: Optional[date] = Query(None, description="Last day (YYYY-MM-DD)")
):
    """Hours and entry counts per client and project."""
    use_case = GetTimeSummaryUseCase(report_service, query_builder)
    use_case.set_authorization_context(context)
    request = TimeSummaryRequestDTO(users=users, date_from=date_from, date_to=date_to)
    return raise_for_result(await use_case.execute(request))
