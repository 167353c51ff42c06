"""Timer service for managing time tracking logic.
Handles the timer lifecycle: start, stop, pause, manual entries, edits and deletes.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from timetracker.domain.models.base import ConflictError, NotFoundError, utc_now
from timetracker.domain.models.time_entry import TimeEntry, TimeEntryChanges
from timetracker.domain.repositories.project_repository import ProjectRepository
from timetracker.domain.repositories.time_entry_repository import TimeEntryRepository


logger = logging.getLogger(__name__)

ACTIVE_ENTRY_EXISTS = "An active entry already exists for this user"
NO_ACTIVE_ENTRY = "No active time entry found"


class TimerService:
    """
    Domain service for the timer state machine.
    
    A user has at most one running timer. The repository enforces that
    atomically; the check made here only reports the common case early.
    """

    def __init__(
        self,
        time_entry_repository: TimeEntryRepository,
        project_repository: ProjectRepository,
        clock: Callable[[], datetime] = utc_now
    ):
        self.time_entry_repository = time_entry_repository
        self.project_repository = project_repository
        self.clock = clock

    async def start(self, user_id: str, project_id: str, description: str = "") -> TimeEntry:
        """
        Start a new timer for time tracking.
        """
        await self._ensure_project_exists(project_id)
        
        existing = await self.time_entry_repository.find_active(user_id)
        if existing is not None:
            raise ConflictError(ACTIVE_ENTRY_EXISTS)
        
        time_entry = TimeEntry.start(user_id, project_id, description, now=self.clock())
        saved = await self.time_entry_repository.add(time_entry)
        
        logger.info(f"Started timer {saved.id} for user {user_id} on project {project_id}")
        return saved

    async def stop(self, user_id: str, entry_id: Optional[str] = None) -> TimeEntry:
        """
        Stop the user's running timer, or a specific one when ``entry_id`` is given.
        """
        time_entry = await self.time_entry_repository.find_active(user_id, entry_id)
        if time_entry is None:
            raise NotFoundError(NO_ACTIVE_ENTRY, "TimeEntry", entry_id)
        
        time_entry.close(self.clock())
        saved = await self.time_entry_repository.update(time_entry)
        
        logger.info(f"Stopped timer {saved.id} for user {user_id} after {saved.duration_minutes} minutes")
        return saved

    async def pause(self, user_id: str) -> TimeEntry:
        """
        Pause the running timer. Paused entries cannot be resumed, so this is
        the same transition as stop.
        """
        logger.info(f"Pausing timer for user {user_id}")
        return await self.stop(user_id)

    async def add_manual_entry(
        self,
        user_id: str,
        project_id: str,
        description: str,
        start_time: datetime,
        end_time: datetime
    ) -> TimeEntry:
        """
        Record a completed period of work.
        """
        await self._ensure_project_exists(project_id)
        
        time_entry = TimeEntry.create_manual(
            user_id, project_id, description, start_time, end_time, now=self.clock()
        )
        saved = await self.time_entry_repository.add(time_entry)
        
        logger.info(f"Added manual entry {saved.id} for user {user_id} ({saved.duration_minutes} minutes)")
        return saved

    async def update_entry(
        self,
        user_id: str,
        entry_id: str,
        changes: TimeEntryChanges
    ) -> Optional[TimeEntry]:
        """
        Apply a partial update to one of the user's entries.
        Returns None if the entry does not exist for this user.
        """
        time_entry = await self.time_entry_repository.find_by_id_for_user(entry_id, user_id)
        if time_entry is None:
            return None
        
        if changes.is_empty:
            return time_entry
        
        if changes.project_id is not None and changes.project_id != time_entry.project_id:
            await self._ensure_project_exists(changes.project_id)
        
        time_entry.apply_changes(changes, now=self.clock())
        saved = await self.time_entry_repository.update(time_entry)
        
        logger.info(f"Updated time entry {entry_id} for user {user_id}")
        return saved

    async def delete_entry(self, user_id: str, entry_id: str) -> bool:
        deleted = await self.time_entry_repository.delete_for_user(entry_id, user_id)
        if deleted:
            logger.info(f"Deleted time entry {entry_id} for user {user_id}")
        return deleted

    async def get_active_entry(self, user_id: str) -> Optional[TimeEntry]:
        return await self.time_entry_repository.find_active(user_id)

    async def _ensure_project_exists(self, project_id: str) -> None:
        if not await self.project_repository.exists(project_id):
            raise NotFoundError.for_entity("Project", project_id)
