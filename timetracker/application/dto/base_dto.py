"""
Base DTOs for the application layer.
Provides common patterns for request/response data transfer objects.
"""

from typing import Generic, List, Optional, TypeVar
from datetime import datetime, timezone
from pydantic import BaseModel, Field, ConfigDict


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BaseDTO(BaseModel):
    """Base DTO with common configuration."""
    
    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        # Convert enum values to their values
        use_enum_values=True,
        # Validate assignment
        validate_assignment=True,
        extra="forbid",
    )


class RequestDTO(BaseDTO):
    """Base class for request DTOs."""
    pass


class ResponseDTO(BaseDTO):
    """Base class for response DTOs."""
    
    id: Optional[str] = None


class TimestampMixin(BaseModel):
    """Mixin for timestamp fields."""
    
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


T = TypeVar('T')


class ListResponseDTO(BaseDTO, Generic[T]):
    """Base class for paginated list responses."""
    
    items: List[T] = Field(description="List of items")
    total: int = Field(description="Total number of items")
    page: int = Field(description="Current page number")
    limit: int = Field(description="Items per page")
    total_pages: int = Field(description="Total number of pages")
    has_next: bool = Field(description="Whether there are more pages")
    has_prev: bool = Field(description="Whether there are previous pages")
    
    @classmethod
    def create(cls, items: List[T], total: int, page: int, limit: int) -> "ListResponseDTO[T]":
        """Create a paginated response."""
        total_pages = (total + limit - 1) // limit if limit > 0 else 0
        
        return cls(
            items=items,
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1
        )


class HealthCheckResponseDTO(BaseDTO):
    """Health check response DTO."""
    
    status: str = Field(description="Service status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Check timestamp")
    version: Optional[str] = Field(default=None, description="Application version")
    environment: Optional[str] = Field(default=None, description="Deployment environment")

