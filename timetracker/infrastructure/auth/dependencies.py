"""
Dependencies for FastAPI.
Wires the request session, repositories, domain services and the caller's
authorization context.
"""

import logging
from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from timetracker.config import get_settings
from timetracker.domain.models.authorization import AuthorizationContext
from timetracker.domain.models.base import ValidationError
from timetracker.domain.services.authorization_service import AuthorizationService
from timetracker.domain.services.query_scope_service import ScopedQueryBuilder
from timetracker.domain.services.report_service import ReportService
from timetracker.domain.services.timer_service import TimerService
from timetracker.infrastructure.auth.jwt_handler import JWTHandler, Principal
from timetracker.infrastructure.db.database import get_db_session
from timetracker.infrastructure.repositories.project_repository import SQLAlchemyProjectRepository
from timetracker.infrastructure.repositories.time_entry_repository import SQLAlchemyTimeEntryRepository
from timetracker.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer()

# Global instances
jwt_handler = JWTHandler()
authorization_service = AuthorizationService()


def get_jwt_handler() -> JWTHandler:
    """Dependency to get JWT handler."""
    return jwt_handler


def get_authorization_service() -> AuthorizationService:
    return authorization_service


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    jwt_handler: Annotated[JWTHandler, Depends(get_jwt_handler)]
) -> Principal:
    """
    FastAPI dependency to get the authenticated caller.
    
    Raises:
        HTTPException: If authentication fails
    """
    try:
        return jwt_handler.get_principal(credentials.credentials)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_time_entry_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> SQLAlchemyTimeEntryRepository:
    return SQLAlchemyTimeEntryRepository(session)


def get_project_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> SQLAlchemyProjectRepository:
    return SQLAlchemyProjectRepository(session)


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> SQLAlchemyUserRepository:
    return SQLAlchemyUserRepository(session)


async def get_authorization_context(
    principal: Annotated[Principal, Depends(get_current_principal)],
    user_repository: Annotated[SQLAlchemyUserRepository, Depends(get_user_repository)],
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)]
) -> AuthorizationContext:
    """
    Build the caller's authorization context.
    Token role claims take precedence over the stored role.
    """
    stored_role = None
    if not principal.role_claim:
        stored_role = await user_repository.get_stored_role(principal.user_id)
    direct_reports = await user_repository.find_direct_report_ids(principal.user_id)
    
    context = authorization.context_for_principal(
        principal.user_id,
        role_claim=principal.role_claim,
        stored_role=stored_role,
        direct_reports=direct_reports
    )
    logger.debug(f"Authorization context for {principal.user_id}: roles={context.role_names}")
    return context


def get_timer_service(
    time_entry_repository: Annotated[SQLAlchemyTimeEntryRepository, Depends(get_time_entry_repository)],
    project_repository: Annotated[SQLAlchemyProjectRepository, Depends(get_project_repository)]
) -> TimerService:
    return TimerService(time_entry_repository, project_repository)


def get_report_service(
    time_entry_repository: Annotated[SQLAlchemyTimeEntryRepository, Depends(get_time_entry_repository)],
    project_repository: Annotated[SQLAlchemyProjectRepository, Depends(get_project_repository)]
) -> ReportService:
    return ReportService(time_entry_repository, project_repository, tz=get_settings().tzinfo)


def get_query_builder(
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)]
) -> ScopedQueryBuilder:
    settings = get_settings()
    return ScopedQueryBuilder(
        authorization,
        tz=settings.tzinfo,
        default_limit=settings.default_page_size,
        max_limit=settings.max_page_size
    )


# Type aliases for cleaner dependency injection
CurrentContext = Annotated[AuthorizationContext, Depends(get_authorization_context)]
TimerServiceDep = Annotated[TimerService, Depends(get_timer_service)]
ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]
QueryBuilderDep = Annotated[ScopedQueryBuilder, Depends(get_query_builder)]
TimeEntryRepositoryDep = Annotated[SQLAlchemyTimeEntryRepository, Depends(get_time_entry_repository)]
ProjectRepositoryDep = Annotated[SQLAlchemyProjectRepository, Depends(get_project_repository)]
