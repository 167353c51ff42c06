"""
Shared fixtures: in-memory repositories and a controllable clock.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Collection, Dict, List, Optional

import pytest

from timetracker.domain.models.base import ConflictError
from timetracker.domain.models.project import Project
from timetracker.domain.models.query_scope import (
    QueryScope, ScopedPage, SortField, SortOrder, TimeEntryListing
)
from timetracker.domain.models.time_entry import TimeEntry
from timetracker.domain.repositories.project_repository import ProjectRepository
from timetracker.domain.repositories.time_entry_repository import TimeEntryRepository
from timetracker.domain.repositories.user_repository import UserRepository
from timetracker.domain.services.authorization_service import AuthorizationService
from timetracker.domain.services.query_scope_service import ScopedQueryBuilder
from timetracker.domain.services.report_service import ReportService
from timetracker.domain.services.timer_service import ACTIVE_ENTRY_EXISTS, TimerService


class FixedClock:
    """Clock returning a settable instant."""
    
    def __init__(self, now: datetime):
        self.now = now
    
    def __call__(self) -> datetime:
        return self.now
    
    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class InMemoryProjectRepository(ProjectRepository):
    
    def __init__(self):
        self.projects: Dict[str, Project] = {}
    
    def put(self, project_id: str, name: str, client_name: Optional[str] = None) -> Project:
        project = Project(
            id=project_id,
            name=name,
            client_id=f"client-{client_name}" if client_name else None,
            client_name=client_name
        )
        self.projects[project_id] = project
        return project
    
    async def exists(self, project_id: str) -> bool:
        return project_id in self.projects
    
    async def get(self, project_id: str) -> Optional[Project]:
        return self.projects.get(project_id)
    
    async def find_by_ids(self, project_ids: Collection[str]) -> Dict[str, Project]:
        return {pid: self.projects[pid] for pid in project_ids if pid in self.projects}


class InMemoryTimeEntryRepository(TimeEntryRepository):
    """
    Dict-backed repository.
    
    ``add`` enforces one active entry per user in a single step, like a unique
    index. With ``latency`` set, reads yield to the event loop first so that
    concurrent callers interleave between their check and their write.
    """
    
    def __init__(self, project_repository: Optional[InMemoryProjectRepository] = None):
        self.entries: Dict[str, TimeEntry] = {}
        self.project_repository = project_repository or InMemoryProjectRepository()
        self.latency = False
    
    async def _io(self) -> None:
        if self.latency:
            await asyncio.sleep(0)
    
    async def add(self, time_entry: TimeEntry) -> TimeEntry:
        await self._io()
        if time_entry.is_active and any(
            e.is_active and e.user_id == time_entry.user_id for e in self.entries.values()
        ):
            raise ConflictError(ACTIVE_ENTRY_EXISTS)
        self.entries[time_entry.id] = time_entry
        return time_entry
    
    async def update(self, time_entry: TimeEntry) -> TimeEntry:
        await self._io()
        self.entries[time_entry.id] = time_entry
        return time_entry
    
    async def find_by_id_for_user(self, entry_id: str, user_id: str) -> Optional[TimeEntry]:
        await self._io()
        entry = self.entries.get(entry_id)
        return entry if entry and entry.user_id == user_id else None
    
    async def find_active(self, user_id: str, entry_id: Optional[str] = None) -> Optional[TimeEntry]:
        await self._io()
        for entry in self.entries.values():
            if entry.user_id == user_id and entry.is_active and (entry_id is None or entry.id == entry_id):
                return entry
        return None
    
    async def delete_for_user(self, entry_id: str, user_id: str) -> bool:
        entry = self.entries.get(entry_id)
        if entry is None or entry.user_id != user_id:
            return False
        del self.entries[entry_id]
        return True
    
    async def find_in_scope(self, scope: QueryScope) -> ScopedPage:
        rows: List[TimeEntryListing] = []
        for entry in self.entries.values():
            project = self.project_repository.projects.get(entry.project_id)
            if project is None:
                continue
            if scope.user_ids is not None and entry.user_id not in scope.user_ids:
                continue
            if scope.project_names and project.name not in scope.project_names:
                continue
            if scope.started_from and entry.start_time < scope.started_from:
                continue
            if scope.started_before and entry.start_time >= scope.started_before:
                continue
            if scope.search:
                term = scope.search.lower()
                haystacks = [entry.description, project.name, project.client_name or ""]
                if not any(term in text.lower() for text in haystacks):
                    continue
            rows.append(TimeEntryListing(entry, project.name, project.client_name))
        
        def sort_key(row: TimeEntryListing):
            if scope.sort_by == SortField.DURATION:
                return row.entry.duration_minutes or 0
            if scope.sort_by == SortField.PROJECT:
                return row.project_name
            return row.entry.start_time
        
        rows.sort(key=sort_key, reverse=scope.sort_order == SortOrder.DESC)
        page = rows[scope.offset:scope.offset + scope.limit]
        return ScopedPage(items=page, total=len(rows), page=scope.page, limit=scope.limit)
    
    async def find_completed_in_range(
        self,
        user_ids: Collection[str],
        started_from: Optional[datetime],
        started_before: Optional[datetime] = None
    ) -> List[TimeEntry]:
        return sorted(
            (
                e for e in self.entries.values()
                if e.user_id in user_ids
                and e.duration_minutes is not None
                and (started_from is None or e.start_time >= started_from)
                and (started_before is None or e.start_time < started_before)
            ),
            key=lambda e: e.start_time
        )
    
    async def find_last_start_time(self, user_ids: Collection[str]) -> Optional[datetime]:
        starts = [e.start_time for e in self.entries.values() if e.user_id in user_ids]
        return max(starts) if starts else None


class InMemoryUserRepository(UserRepository):
    
    def __init__(self):
        self.roles: Dict[str, str] = {}
        self.managers: Dict[str, str] = {}
    
    async def get_stored_role(self, user_id: str) -> Optional[str]:
        return self.roles.get(user_id)
    
    async def find_direct_report_ids(self, manager_id: str) -> List[str]:
        return sorted(uid for uid, mid in self.managers.items() if mid == manager_id)


# 2024-03-13 is a Wednesday
NOW = datetime(2024, 3, 13, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def project_repository():
    repository = InMemoryProjectRepository()
    repository.put("p1", "Website", "Acme")
    repository.put("p2", "Mobile App", "Globex")
    return repository


@pytest.fixture
def time_entry_repository(project_repository):
    return InMemoryTimeEntryRepository(project_repository)


@pytest.fixture
def user_repository():
    return InMemoryUserRepository()


@pytest.fixture
def authorization_service():
    return AuthorizationService()


@pytest.fixture
def query_builder(authorization_service):
    return ScopedQueryBuilder(authorization_service)


@pytest.fixture
def timer_service(time_entry_repository, project_repository, clock):
    return TimerService(time_entry_repository, project_repository, clock=clock)


@pytest.fixture
def report_service(time_entry_repository, project_repository, clock):
    return ReportService(time_entry_repository, project_repository, clock=clock)


@pytest.fixture
def make_entry(time_entry_repository):
    """Store a closed entry directly, bypassing the timer service."""
    
    def _make(user_id: str, project_id: str, start: datetime, minutes: int, description: str = ""):
        entry = TimeEntry.create_manual(
            user_id, project_id, description, start, start + timedelta(minutes=minutes), now=start
        )
        time_entry_repository.entries[entry.id] = entry
        return entry
    
    return _make
