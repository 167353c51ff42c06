"""Time Entry repository interface.
Defines the contract for time entry data persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Collection, List, Optional

from timetracker.domain.models.time_entry import TimeEntry
from timetracker.domain.models.query_scope import QueryScope, ScopedPage


class TimeEntryRepository(ABC):
    """
    Repository interface for TimeEntry entity.
    
    Implementations must refuse to store a second active entry for the same
    user and signal it with ConflictError.
    """

    @abstractmethod
    async def add(self, time_entry: TimeEntry) -> TimeEntry:
        """
        Insert a new time entry.
        Raises ConflictError if the user already has an active entry.
        """
        pass

    @abstractmethod
    async def update(self, time_entry: TimeEntry) -> TimeEntry:
        """Persist changes to an existing time entry."""
        pass

    @abstractmethod
    async def find_by_id_for_user(self, entry_id: str, user_id: str) -> Optional[TimeEntry]:
        """
        Find an entry by ID, only if it belongs to the user.
        Returns None if not found.
        """
        pass

    @abstractmethod
    async def find_active(self, user_id: str, entry_id: Optional[str] = None) -> Optional[TimeEntry]:
        """
        Find the user's running timer, optionally narrowed to one entry ID.
        """
        pass

    @abstractmethod
    async def delete_for_user(self, entry_id: str, user_id: str) -> bool:
        """
        Delete an entry owned by the user.
        Returns True if a row was removed.
        """
        pass

    @abstractmethod
    async def find_in_scope(self, scope: QueryScope) -> ScopedPage:
        """
        Run a listing scope: filter, order and paginate entries joined with
        their project and client names.
        """
        pass

    @abstractmethod
    async def find_completed_in_range(
        self,
        user_ids: Collection[str],
        started_from: Optional[datetime],
        started_before: Optional[datetime] = None
    ) -> List[TimeEntry]:
        """
        Find entries with a recorded duration whose start time falls in
        ``[started_from, started_before)``. A missing bound is open.
        """
        pass

    @abstractmethod
    async def find_last_start_time(self, user_ids: Collection[str]) -> Optional[datetime]:
        """Latest start time across the users' entries, or None."""
        pass
