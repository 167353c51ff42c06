"""
Base entity and domain exceptions.
This module contains the foundational classes for all domain entities.
"""

from datetime import datetime, timezone
from typing import Optional, Any
from abc import ABC
from dataclasses import dataclass, field
import uuid


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_entity_id() -> str:
    """Generate an opaque unique identifier."""
    return uuid.uuid4().hex


@dataclass
class BaseEntity(ABC):
    """
    Base class for all domain entities.
    Provides common attributes and behavior for all entities.
    """
    
    id: str = field(default_factory=new_entity_id)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    
    def __eq__(self, other: Any) -> bool:
        """Entities are equal if they have the same ID and are of the same type."""
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id
    
    def __hash__(self) -> int:
        """Hash based on entity ID."""
        return hash((self.__class__.__name__, self.id))
    
    def mark_as_updated(self, when: Optional[datetime] = None) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = when or utc_now()
    
    def validate(self) -> None:
        """
        Validate the entity's state.
        Should be overridden by subclasses to implement specific validation rules.
        Raises ValidationError if the entity is in an invalid state.
        """
        pass


class DomainException(Exception):
    """Base exception for domain errors."""
    
    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ValidationError(DomainException):
    """Exception raised when input shape or ordering is invalid."""
    
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, "VALIDATION_ERROR")
        self.field = field


class NotFoundError(DomainException):
    """Exception raised when a project or entry cannot be found."""
    
    def __init__(self, message: str, entity_type: Optional[str] = None, entity_id: Any = None):
        super().__init__(message, "NOT_FOUND")
        self.entity_type = entity_type
        self.entity_id = entity_id
    
    @classmethod
    def for_entity(cls, entity_type: str, entity_id: Any) -> "NotFoundError":
        """Build the standard '<type> with id <id> not found' error."""
        return cls(f"{entity_type} with id {entity_id} not found", entity_type, entity_id)


class ConflictError(DomainException):
    """Exception raised when a write would break a uniqueness rule."""
    
    def __init__(self, message: str):
        super().__init__(message, "CONFLICT")


class ForbiddenError(DomainException):
    """Exception raised when an authorization check denies access."""
    
    def __init__(self, reason: str):
        super().__init__(reason, "FORBIDDEN")
        self.reason = reason


class UnexpectedError(DomainException):
    """Exception raised for persistence or infrastructure failures."""
    
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, "UNEXPECTED_ERROR")
        self.cause = cause
