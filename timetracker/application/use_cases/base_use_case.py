"""
Base use case classes for the application layer.
Provides common patterns and structure for use case implementations.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, TypeVar, Generic
from dataclasses import dataclass

from timetracker.domain.models.authorization import AuthorizationContext
from timetracker.domain.models.base import DomainException, UnexpectedError, ValidationError, utc_now


logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


@dataclass
class UseCaseResult(Generic[T]):
    """Result wrapper for use case operations."""
    
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    
    @classmethod
    def success_result(cls, data: T, metadata: Optional[Dict[str, Any]] = None) -> "UseCaseResult[T]":
        """Create a successful result."""
        return cls(success=True, data=data, metadata=metadata)
    
    @classmethod
    def error_result(
        cls, 
        error: str, 
        error_code: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "UseCaseResult[T]":
        """Create an error result."""
        return cls(
            success=False, 
            error=error, 
            error_code=error_code,
            metadata=metadata
        )
    
    @classmethod
    def from_exception(cls, exc: Exception) -> "UseCaseResult[T]":
        """Create error result from exception."""
        if isinstance(exc, DomainException):
            return cls.error_result(exc.message, exc.code)
        return cls.error_result("An unexpected error occurred", "UNEXPECTED_ERROR")


class BaseUseCase(ABC, Generic[T, R]):
    """
    Base class for all use cases.
    Provides common structure and error handling.
    """
    
    def __init__(self):
        self.execution_start = None
        self.execution_end = None
    
    async def execute(self, request: T) -> UseCaseResult[R]:
        """
        Execute the use case with proper error handling and logging.
        
        Domain errors become error results. Anything else is logged and
        reported as UNEXPECTED_ERROR.
        """
        self.execution_start = utc_now()
        
        try:
            # Validate input
            await self._validate_request(request)
            
            # Execute business logic
            result = await self._execute_business_logic(request)
            
            self.execution_end = utc_now()
            execution_time = (self.execution_end - self.execution_start).total_seconds()
            
            return UseCaseResult.success_result(
                result,
                metadata={
                    "execution_time_seconds": execution_time,
                    "executed_at": self.execution_end.isoformat()
                }
            )
        
        except Exception as exc:
            self.execution_end = utc_now()
            execution_time = (self.execution_end - self.execution_start).total_seconds()
            
            if isinstance(exc, DomainException):
                logger.info(f"{self.__class__.__name__} failed with {exc.code}: {exc.message}")
            else:
                logger.error(f"Unexpected error in {self.__class__.__name__}: {exc}", exc_info=True)
                exc = UnexpectedError("An unexpected error occurred", exc)
            
            error_result = UseCaseResult.from_exception(exc)
            error_result.metadata = {
                "execution_time_seconds": execution_time,
                "failed_at": self.execution_end.isoformat(),
                "exception_type": type(exc).__name__
            }
            
            return error_result
    
    async def _validate_request(self, request: T) -> None:
        """
        Validate the request. Override in subclasses if needed.
        """
        if hasattr(request, 'model_validate') and hasattr(request, 'model_dump'):
            # Pydantic models
            request.model_validate(request.model_dump())
    
    @abstractmethod
    async def _execute_business_logic(self, request: T) -> R:
        """
        Execute the core business logic. Must be implemented by subclasses.
        """
        pass


class QueryUseCase(BaseUseCase[T, R]):
    """
    Base class for query use cases (read operations).
    """
    pass


class CommandUseCase(BaseUseCase[T, R]):
    """
    Base class for command use cases (write operations).
    """
    
    async def _execute_business_logic(self, request: T) -> R:
        return await self._execute_command_logic(request)
    
    @abstractmethod
    async def _execute_command_logic(self, request: T) -> R:
        """Execute the command logic. Must be implemented by subclasses."""
        pass


class AuthorizedUseCase(BaseUseCase[T, R]):
    """
    Mixin for use cases that run on behalf of an authenticated principal.
    """
    
    def __init__(self):
        super().__init__()
        self.context: Optional[AuthorizationContext] = None
    
    def set_authorization_context(self, context: AuthorizationContext) -> None:
        """Set the current principal's authorization context."""
        self.context = context
    
    @property
    def current_user_id(self) -> Optional[str]:
        return self.context.principal_id if self.context else None
    
    async def _validate_request(self, request: T) -> None:
        """Validate request with authentication check."""
        await super()._validate_request(request)
        
        if self.context is None:
            raise ValidationError("User authentication required")
