"""
User repository implementation using SQLAlchemy.
"""

import logging
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.domain.models.base import UnexpectedError
from timetracker.domain.repositories.user_repository import UserRepository as UserRepositoryInterface
from timetracker.infrastructure.db.models import UserModel


logger = logging.getLogger(__name__)


class SQLAlchemyUserRepository(UserRepositoryInterface):
    """Reads stored roles and reporting lines from the users table."""
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    async def get_stored_role(self, user_id: str) -> Optional[str]:
        stmt = select(UserModel.role).where(UserModel.id == user_id)
        try:
            return (await self.session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Database error loading role for user {user_id}: {e}")
            raise UnexpectedError("Could not load user role", e) from e
    
    async def find_direct_report_ids(self, manager_id: str) -> List[str]:
        stmt = select(UserModel.id).where(UserModel.manager_id == manager_id).order_by(UserModel.id)
        try:
            return list((await self.session.execute(stmt)).scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Database error loading direct reports of {manager_id}: {e}")
            raise UnexpectedError("Could not load direct reports", e) from e
