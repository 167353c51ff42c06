"""
Time Entry use cases for the application layer.
Implements the time tracking operations exposed to the web adapter.
"""

from dataclasses import dataclass
from typing import Optional

from timetracker.application.use_cases.base_use_case import (
    AuthorizedUseCase, CommandUseCase, QueryUseCase
)
from timetracker.application.dto.time_entry_dto import (
    StartTimerRequestDTO, TimerActionRequestDTO, CreateManualEntryRequestDTO,
    UpdateTimeEntryRequestDTO, ListTimeEntriesRequestDTO, TimeEntryResponseDTO,
    TimeEntryListItemDTO, TimeEntryListResponseDTO, ActiveTimerResponseDTO,
    TimerActionResponseDTO, DeleteTimeEntryResponseDTO
)
from timetracker.domain.models.base import NotFoundError, ValidationError
from timetracker.domain.repositories.project_repository import ProjectRepository
from timetracker.domain.repositories.time_entry_repository import TimeEntryRepository
from timetracker.domain.services.query_scope_service import ScopedQueryBuilder
from timetracker.domain.services.timer_service import TimerService


TIMER_ACTIONS = {"stop": "stopped", "pause": "paused"}


@dataclass
class UpdateTimeEntryCommand:
    entry_id: str
    changes: UpdateTimeEntryRequestDTO


class StartTimerUseCase(AuthorizedUseCase, CommandUseCase[StartTimerRequestDTO, TimeEntryResponseDTO]):
    """Use case for starting a timer."""
    
    def __init__(self, timer_service: TimerService):
        super().__init__()
        self.timer_service = timer_service
    
    async def _execute_command_logic(self, request: StartTimerRequestDTO) -> TimeEntryResponseDTO:
        entry = await self.timer_service.start(
            self.current_user_id, request.project_id, request.description
        )
        return TimeEntryResponseDTO.from_entity(entry)


class TimerActionUseCase(AuthorizedUseCase, CommandUseCase[TimerActionRequestDTO, TimerActionResponseDTO]):
    """Use case for stopping or pausing the running timer."""
    
    def __init__(self, timer_service: TimerService):
        super().__init__()
        self.timer_service = timer_service
    
    async def _validate_request(self, request: TimerActionRequestDTO) -> None:
        await super()._validate_request(request)
        
        if request.action not in TIMER_ACTIONS:
            raise ValidationError("Invalid action. Must be 'stop' or 'pause'", "action")
    
    async def _execute_command_logic(self, request: TimerActionRequestDTO) -> TimerActionResponseDTO:
        if request.action == "pause":
            entry = await self.timer_service.pause(self.current_user_id)
        else:
            entry = await self.timer_service.stop(self.current_user_id, request.entry_id)
        
        return TimerActionResponseDTO(
            id=entry.id,
            action=TIMER_ACTIONS[request.action],
            duration_minutes=entry.duration_minutes,
            entry=TimeEntryResponseDTO.from_entity(entry)
        )


class CreateManualEntryUseCase(AuthorizedUseCase, CommandUseCase[CreateManualEntryRequestDTO, TimeEntryResponseDTO]):
    """Use case for creating a manual time entry."""
    
    def __init__(self, timer_service: TimerService):
        super().__init__()
        self.timer_service = timer_service
    
    async def _execute_command_logic(self, request: CreateManualEntryRequestDTO) -> TimeEntryResponseDTO:
        entry = await self.timer_service.add_manual_entry(
            self.current_user_id,
            request.project_id,
            request.description,
            request.start_time,
            request.end_time
        )
        return TimeEntryResponseDTO.from_entity(entry)


class UpdateTimeEntryUseCase(AuthorizedUseCase, CommandUseCase[UpdateTimeEntryCommand, TimeEntryResponseDTO]):
    """Use case for editing one of the caller's entries."""
    
    def __init__(self, timer_service: TimerService):
        super().__init__()
        self.timer_service = timer_service
    
    async def _execute_command_logic(self, request: UpdateTimeEntryCommand) -> TimeEntryResponseDTO:
        entry = await self.timer_service.update_entry(
            self.current_user_id, request.entry_id, request.changes.to_changes()
        )
        if entry is None:
            raise NotFoundError.for_entity("Time entry", request.entry_id)
        return TimeEntryResponseDTO.from_entity(entry)


class DeleteTimeEntryUseCase(AuthorizedUseCase, CommandUseCase[str, DeleteTimeEntryResponseDTO]):
    """Use case for deleting one of the caller's entries."""
    
    def __init__(self, timer_service: TimerService):
        super().__init__()
        self.timer_service = timer_service
    
    async def _execute_command_logic(self, entry_id: str) -> DeleteTimeEntryResponseDTO:
        if not await self.timer_service.delete_entry(self.current_user_id, entry_id):
            raise NotFoundError.for_entity("Time entry", entry_id)
        return DeleteTimeEntryResponseDTO(id=entry_id, deleted=True)


class GetActiveTimerUseCase(AuthorizedUseCase, QueryUseCase[None, ActiveTimerResponseDTO]):
    """Use case for reading the caller's running timer."""
    
    def __init__(self, timer_service: TimerService, project_repository: ProjectRepository):
        super().__init__()
        self.timer_service = timer_service
        self.project_repository = project_repository
    
    async def _execute_business_logic(self, request: None) -> ActiveTimerResponseDTO:
        entry = await self.timer_service.get_active_entry(self.current_user_id)
        if entry is None:
            return ActiveTimerResponseDTO.idle()
        
        project = await self.project_repository.get(entry.project_id)
        return ActiveTimerResponseDTO(
            id=entry.id,
            is_active=True,
            project_id=entry.project_id,
            project_name=project.name if project else None,
            client_name=project.client_name if project else None,
            description=entry.description,
            start_time=entry.start_time,
            elapsed_minutes=entry.elapsed_minutes(self.timer_service.clock())
        )


class ListTimeEntriesUseCase(AuthorizedUseCase, QueryUseCase[ListTimeEntriesRequestDTO, TimeEntryListResponseDTO]):
    """Use case for listing entries the caller is allowed to see."""
    
    def __init__(self, time_entry_repository: TimeEntryRepository, query_builder: ScopedQueryBuilder):
        super().__init__()
        self.time_entry_repository = time_entry_repository
        self.query_builder = query_builder
    
    async def _execute_business_logic(self, request: ListTimeEntriesRequestDTO) -> TimeEntryListResponseDTO:
        scope = self.query_builder.build(self.context, request.to_filters())
        page = await self.time_entry_repository.find_in_scope(scope)
        
        return TimeEntryListResponseDTO.create(
            items=[TimeEntryListItemDTO.from_listing(row) for row in page.items],
            total=page.total,
            page=page.page,
            limit=page.limit
        )
