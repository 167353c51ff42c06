"""
Project repository implementation using SQLAlchemy.
"""

import logging
from typing import Collection, Dict, Optional
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.domain.models.base import UnexpectedError
from timetracker.domain.models.project import Project
from timetracker.domain.repositories.project_repository import ProjectRepository as ProjectRepositoryInterface
from timetracker.infrastructure.db.models import ClientModel, ProjectModel
from timetracker.infrastructure.mappers.time_entry_mapper import ProjectMapper


logger = logging.getLogger(__name__)


class SQLAlchemyProjectRepository(ProjectRepositoryInterface):
    """SQLAlchemy implementation of the project read repository."""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.mapper = ProjectMapper()
    
    async def exists(self, project_id: str) -> bool:
        stmt = select(ProjectModel.id).where(ProjectModel.id == project_id)
        try:
            found = (await self.session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Database error checking project {project_id}: {e}")
            raise UnexpectedError("Could not load project", e) from e
        return found is not None
    
    async def get(self, project_id: str) -> Optional[Project]:
        projects = await self.find_by_ids([project_id])
        return projects.get(project_id)
    
    async def find_by_ids(self, project_ids: Collection[str]) -> Dict[str, Project]:
        if not project_ids:
            return {}
        
        stmt = (
            select(ProjectModel, ClientModel.name)
            .outerjoin(ClientModel, ClientModel.id == ProjectModel.client_id)
            .where(ProjectModel.id.in_(list(project_ids)))
        )
        try:
            rows = (await self.session.execute(stmt)).all()
        except SQLAlchemyError as e:
            logger.error(f"Database error loading projects: {e}")
            raise UnexpectedError("Could not load projects", e) from e
        
        return {
            model.id: self.mapper.model_to_domain(model, client_name)
            for model, client_name in rows
        }
