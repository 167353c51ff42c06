"""
Time entry repository implementation using SQLAlchemy.
"""

import logging
from typing import Collection, List, Optional
from datetime import datetime
from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.domain.models.base import ConflictError, UnexpectedError
from timetracker.domain.models.query_scope import (
    QueryScope, ScopedPage, SortField, SortOrder, TimeEntryListing
)
from timetracker.domain.models.time_entry import TimeEntry
from timetracker.domain.repositories.time_entry_repository import TimeEntryRepository as TimeEntryRepositoryInterface
from timetracker.domain.services.timer_service import ACTIVE_ENTRY_EXISTS
from timetracker.infrastructure.db.models import ClientModel, ProjectModel, TimeEntryModel
from timetracker.infrastructure.mappers.time_entry_mapper import TimeEntryMapper, as_utc


logger = logging.getLogger(__name__)


def like_pattern(term: str) -> str:
    """Substring pattern with LIKE wildcards in ``term`` escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SQLAlchemyTimeEntryRepository(TimeEntryRepositoryInterface):
    """SQLAlchemy implementation of time entry repository."""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.mapper = TimeEntryMapper()
        self.model = TimeEntryModel
    
    async def add(self, time_entry: TimeEntry) -> TimeEntry:
        """Insert a time entry; a second active entry for the user is a conflict."""
        model = self.mapper.domain_to_model(time_entry)
        self.session.add(model)
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            if time_entry.is_active:
                logger.info(f"Rejected second active entry for user {time_entry.user_id}")
                raise ConflictError(ACTIVE_ENTRY_EXISTS) from e
            logger.error(f"Integrity error saving time entry {time_entry.id}: {e}")
            raise UnexpectedError("Could not save time entry", e) from e
        except SQLAlchemyError as e:
            logger.error(f"Database error saving time entry {time_entry.id}: {e}")
            raise UnexpectedError("Could not save time entry", e) from e
        
        return self.mapper.model_to_domain(model)
    
    async def update(self, time_entry: TimeEntry) -> TimeEntry:
        """Persist changes to an existing entry."""
        try:
            model = await self.session.get(TimeEntryModel, time_entry.id)
            if model is None:
                raise UnexpectedError(f"Time entry {time_entry.id} disappeared during update")
            
            self.mapper.update_model(model, time_entry)
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Database error updating time entry {time_entry.id}: {e}")
            raise UnexpectedError("Could not update time entry", e) from e
        
        return self.mapper.model_to_domain(model)
    
    async def find_by_id_for_user(self, entry_id: str, user_id: str) -> Optional[TimeEntry]:
        stmt = select(TimeEntryModel).where(
            and_(TimeEntryModel.id == entry_id, TimeEntryModel.user_id == user_id)
        )
        model = await self._scalar(stmt)
        return self.mapper.model_to_domain(model) if model else None
    
    async def find_active(self, user_id: str, entry_id: Optional[str] = None) -> Optional[TimeEntry]:
        """Get currently running time entry for user."""
        conditions = [TimeEntryModel.user_id == user_id, TimeEntryModel.is_active.is_(True)]
        if entry_id:
            conditions.append(TimeEntryModel.id == entry_id)
        
        model = await self._scalar(select(TimeEntryModel).where(and_(*conditions)).limit(1))
        return self.mapper.model_to_domain(model) if model else None
    
    async def delete_for_user(self, entry_id: str, user_id: str) -> bool:
        """Delete time entry by ID if the user owns it."""
        stmt = delete(TimeEntryModel).where(
            and_(TimeEntryModel.id == entry_id, TimeEntryModel.user_id == user_id)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Database error deleting time entry {entry_id}: {e}")
            raise UnexpectedError("Could not delete time entry", e) from e
        return result.rowcount > 0
    
    async def find_in_scope(self, scope: QueryScope) -> ScopedPage:
        """Filter, order and paginate entries joined with project and client names."""
        conditions = self._scope_conditions(scope)
        
        stmt = (
            select(TimeEntryModel, ProjectModel.name, ClientModel.name)
            .join(ProjectModel, ProjectModel.id == TimeEntryModel.project_id)
            .outerjoin(ClientModel, ClientModel.id == ProjectModel.client_id)
            .where(*conditions)
            .order_by(self._order_by(scope))
            .limit(scope.limit)
            .offset(scope.offset)
        )
        count_stmt = (
            select(func.count())
            .select_from(TimeEntryModel)
            .join(ProjectModel, ProjectModel.id == TimeEntryModel.project_id)
            .outerjoin(ClientModel, ClientModel.id == ProjectModel.client_id)
            .where(*conditions)
        )
        
        try:
            rows = (await self.session.execute(stmt)).all()
            total = (await self.session.execute(count_stmt)).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Database error listing time entries: {e}")
            raise UnexpectedError("Could not list time entries", e) from e
        
        items = [
            TimeEntryListing(
                entry=self.mapper.model_to_domain(model),
                project_name=project_name,
                client_name=client_name
            )
            for model, project_name, client_name in rows
        ]
        return ScopedPage(items=items, total=total, page=scope.page, limit=scope.limit)
    
    async def find_completed_in_range(
        self,
        user_ids: Collection[str],
        started_from: Optional[datetime],
        started_before: Optional[datetime] = None
    ) -> List[TimeEntry]:
        conditions = [
            TimeEntryModel.user_id.in_(list(user_ids)),
            TimeEntryModel.duration_minutes.isnot(None),
        ]
        if started_from is not None:
            conditions.append(TimeEntryModel.start_time >= started_from)
        if started_before is not None:
            conditions.append(TimeEntryModel.start_time < started_before)
        
        stmt = select(TimeEntryModel).where(and_(*conditions)).order_by(TimeEntryModel.start_time)
        try:
            models = (await self.session.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Database error loading completed entries: {e}")
            raise UnexpectedError("Could not load time entries", e) from e
        return [self.mapper.model_to_domain(model) for model in models]
    
    async def find_last_start_time(self, user_ids: Collection[str]) -> Optional[datetime]:
        stmt = select(func.max(TimeEntryModel.start_time)).where(
            TimeEntryModel.user_id.in_(list(user_ids))
        )
        try:
            last = (await self.session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Database error loading last activity: {e}")
            raise UnexpectedError("Could not load last activity", e) from e
        return as_utc(last)
    
    def _scope_conditions(self, scope: QueryScope) -> list:
        conditions = []
        if scope.user_ids is not None:
            conditions.append(TimeEntryModel.user_id.in_(sorted(scope.user_ids)))
        if scope.project_names:
            conditions.append(ProjectModel.name.in_(list(scope.project_names)))
        if scope.started_from is not None:
            conditions.append(TimeEntryModel.start_time >= scope.started_from)
        if scope.started_before is not None:
            conditions.append(TimeEntryModel.start_time < scope.started_before)
        if scope.search:
            pattern = like_pattern(scope.search)
            conditions.append(or_(
                TimeEntryModel.description.ilike(pattern, escape="\\"),
                ProjectModel.name.ilike(pattern, escape="\\"),
                ClientModel.name.ilike(pattern, escape="\\"),
            ))
        return conditions
    
    def _order_by(self, scope: QueryScope):
        column = {
            SortField.DATE: TimeEntryModel.start_time,
            SortField.DURATION: TimeEntryModel.duration_minutes,
            SortField.PROJECT: ProjectModel.name,
        }[scope.sort_by]
        return column.asc() if scope.sort_order == SortOrder.ASC else column.desc()
    
    async def _scalar(self, stmt):
        try:
            return (await self.session.execute(stmt)).scalars().first()
        except SQLAlchemyError as e:
            logger.error(f"Database error loading time entry: {e}")
            raise UnexpectedError("Could not load time entry", e) from e
