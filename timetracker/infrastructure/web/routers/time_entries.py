"""
Time tracking router.
Handles the timer, manual entries, edits, deletes and the scoped entry listing.
"""

from typing import Optional
from fastapi import APIRouter, Query, status

from timetracker.application.dto.time_entry_dto import (
    StartTimerRequestDTO,
    TimerActionRequestDTO,
    CreateManualEntryRequestDTO,
    UpdateTimeEntryRequestDTO,
    ListTimeEntriesRequestDTO,
    TimeEntryResponseDTO,
    TimeEntryListResponseDTO,
    ActiveTimerResponseDTO,
    TimerActionResponseDTO,
    DeleteTimeEntryResponseDTO,
)
from timetracker.application.use_cases.time_entry_use_cases import (
    StartTimerUseCase,
    TimerActionUseCase,
    CreateManualEntryUseCase,
    UpdateTimeEntryUseCase,
    UpdateTimeEntryCommand,
    DeleteTimeEntryUseCase,
    GetActiveTimerUseCase,
    ListTimeEntriesUseCase,
)
from timetracker.infrastructure.auth.dependencies import (
    CurrentContext,
    ProjectRepositoryDep,
    QueryBuilderDep,
    TimeEntryRepositoryDep,
    TimerServiceDep,
)
from timetracker.infrastructure.web.middleware.error_handler import raise_for_result


router = APIRouter()


@router.get("", response_model=TimeEntryListResponseDTO)
async def list_time_entries(
    context: CurrentContext,
    repository: TimeEntryRepositoryDep,
    query_builder: QueryBuilderDep,
    users: Optional[str] = Query(None, description="'all' or comma-separated user IDs"),
    projects: Optional[str] = Query(None, description="'all' or comma-separated project names"),
    search: Optional[str] = Query(None, description="Search description, project and client"),
    date_from: Optional[str] = Query(None, description="First day (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, description="Last day (YYYY-MM-DD)"),
    sort_by: Optional[str] = Query(None, description="date, duration or project"),
    sort_order: Optional[str] = Query(None, description="asc or desc"),
    page: Optional[str] = Query(None, description="Page number"),
    limit: Optional[str] = Query(None, description="Items per page")
):
    """
    List time entries visible to the caller.
    
    - **users**: omitted for your own entries; other users need HR/admin or manager rights
    - **projects**, **search**, **date_from**, **date_to**: narrow the listing
    - **sort_by** / **sort_order**: ordering; **page** / **limit**: pagination
    """
    request = ListTimeEntriesRequestDTO(
        users=users,
        projects=projects,
        search=search,
        date_from=date_from,
        date_to=date_to,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit
    )
    use_case = ListTimeEntriesUseCase(repository, query_builder)
    use_case.set_authorization_context(context)
    return raise_for_result(await use_case.execute(request))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=TimeEntryResponseDTO)
async def start_timer(
    request: StartTimerRequestDTO,
    context: CurrentContext,
    timer_service: TimerServiceDep
):
    """
    Start a timer on a project. Fails with 409 while another timer is running.
    """
    use_case = StartTimerUseCase(timer_service)
    use_case.set_authorization_context(context)
    return raise_for_result(await use_case.execute(request))


@router.post("/manual", status_code=status.HTTP_201_CREATED, response_model=TimeEntryResponseDTO)
async def create_manual_entry(
    request: CreateManualEntryRequestDTO,
    context: CurrentContext,
    timer_service: TimerServiceDep
):
    """
    Record a finished period of work.
    
    - **start_time** / **end_time**: ISO timestamps, end strictly after start
    """
    use_case = CreateManualEntryUseCase(timer_service)
    use_case.set_authorization_context(context)
    return raise_for_result(await use_case.execute(request))


@router.get("/active", response_model=ActiveTimerResponseDTO)
async def get_active_timer(
    context: CurrentContext,
    timer_service: TimerServiceDep,
    project_repository: ProjectRepositoryDep
):
    """Get the caller's running timer, if any."""
    use_case = GetActiveTimerUseCase(timer_service, project_repository)
    use_case.set_authorization_context(context)
    return raise_for_result(await use_case.execute(None))


@router.patch("/active", response_model=TimerActionResponseDTO)
async def act_on_active_timer(
    request: TimerActionRequestDTO,
    context: CurrentContext,
    timer_service: TimerServiceDep
):
    """
    Stop or pause the running timer.
    
    - **action**: 'stop' or 'pause'
    """
    use_case = TimerActionUseCase(timer_service)
    use_case.set_authorization_context(context)
    return raise_for_result(await use_case.execute(request))


@router.patch("/{entry_id}", response_model=TimeEntryResponseDTO)
async def update_time_entry(
    entry_id: str,
    request: UpdateTimeEntryRequestDTO,
    context: CurrentContext,
    timer_service: TimerServiceDep
):
    """
    Edit one of your entries. Changing either time recomputes the duration.
    """
    use_case = UpdateTimeEntryUseCase(timer_service)
    use_case.set_authorization_context(context)
    return raise_for_result(await use_case.execute(UpdateTimeEntryCommand(entry_id, request)))


@router.delete("/{entry_id}", response_model=DeleteTimeEntryResponseDTO)
async def delete_time_entry(
    entry_id: str,
    context: CurrentContext,
    timer_service: TimerServiceDep
):
    """Delete one of your entries."""
    use_case = DeleteTimeEntryUseCase(timer_service)
    use_case.set_authorization_context(context)
    return raise_for_result(await use_case.execute(entry_id))
