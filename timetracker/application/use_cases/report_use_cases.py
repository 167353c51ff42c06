"""
Report use cases for the application layer.
Each report first authorizes the requested users, then aggregates.
"""

from typing import List

from timetracker.application.use_cases.base_use_case import AuthorizedUseCase, QueryUseCase
from timetracker.application.dto.report_dto import (
    ReportRequestDTO, DailyHoursRequestDTO, MonthlyHoursRequestDTO, TimeSummaryRequestDTO,
    DashboardSummaryResponseDTO, DailyHoursDTO, ProjectHoursDTO, MonthlyHoursDTO,
    TimeSummaryRowDTO
)
from timetracker.domain.models.query_scope import ReportScope
from timetracker.domain.services.query_scope_service import ScopedQueryBuilder
from timetracker.domain.services.report_service import (
    DEFAULT_REPORT_DAYS, DEFAULT_REPORT_MONTHS, ReportService
)


class ReportUseCase(AuthorizedUseCase, QueryUseCase):
    """Shared wiring for report use cases."""
    
    def __init__(self, report_service: ReportService, query_builder: ScopedQueryBuilder):
        super().__init__()
        self.report_service = report_service
        self.query_builder = query_builder
    
    def _scope(self, request: ReportRequestDTO) -> ReportScope:
        return self.query_builder.build_report_scope(self.context, request.users)


class GetDashboardSummaryUseCase(ReportUseCase):
    
    async def _execute_business_logic(self, request: ReportRequestDTO) -> DashboardSummaryResponseDTO:
        summary = await self.report_service.dashboard_summary(self._scope(request))
        return DashboardSummaryResponseDTO.from_summary(summary)


class GetDailyHoursUseCase(ReportUseCase):
    
    def __init__(self, report_service: ReportService, query_builder: ScopedQueryBuilder,
                 default_days: int = DEFAULT_REPORT_DAYS):
        super().__init__(report_service, query_builder)
        self.default_days = default_days
    
    async def _execute_business_logic(self, request: DailyHoursRequestDTO) -> List[DailyHoursDTO]:
        days = request.days if request.days is not None else self.default_days
        rows = await self.report_service.daily_hours(self._scope(request), days)
        return [DailyHoursDTO.from_row(row) for row in rows]


class GetHoursByProjectUseCase(ReportUseCase):
    
    async def _execute_business_logic(self, request: ReportRequestDTO) -> List[ProjectHoursDTO]:
        rows = await self.report_service.hours_by_project_current_month(self._scope(request))
        return [ProjectHoursDTO.from_row(row) for row in rows]


class GetMonthlyHoursUseCase(ReportUseCase):
    
    def __init__(self, report_service: ReportService, query_builder: ScopedQueryBuilder,
                 default_months: int = DEFAULT_REPORT_MONTHS):
        super().__init__(report_service, query_builder)
        self.default_months = default_months
    
    async def _execute_business_logic(self, request: MonthlyHoursRequestDTO) -> List[MonthlyHoursDTO]:
        months = request.months if request.months is not None else self.default_months
        rows = await self.report_service.monthly_billed_hours(self._scope(request), months)
        return [MonthlyHoursDTO.from_row(row) for row in rows]


class GetTimeSummaryUseCase(ReportUseCase):
    
    async def _execute_business_logic(self, request: TimeSummaryRequestDTO) -> List[TimeSummaryRowDTO]:
        rows = await self.report_service.time_summary(
            self._scope(request), request.date_from, request.date_to
        )
        return [TimeSummaryRowDTO.from_row(row) for row in rows]
