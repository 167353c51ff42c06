"""
Application configuration using Pydantic Settings.
Loads environment variables and provides type-safe configuration.
"""

from typing import List, Optional
from functools import lru_cache
from datetime import tzinfo
from zoneinfo import ZoneInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

DEFAULT_JWT_SECRET = "development-secret-key-change-in-production"
DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    # Environment
    environment: str = Field(default="development", description="Current environment")
    debug: bool = Field(default=False, description="Debug mode")
    
    # API Configuration
    api_title: str = Field(default="Time Tracker")
    api_version: str = Field(default="1.0.0")
    api_prefix: str = Field(default="/api/v1")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    
    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./timetracker.db",
        description="SQLAlchemy database URL"
    )
    database_auto_create: bool = Field(default=True, description="Create missing tables on startup")
    
    # JWT Configuration
    jwt_secret_key: str = Field(default=DEFAULT_JWT_SECRET, description="JWT secret key")
    jwt_algorithm: str = Field(default="HS256")
    jwt_role_claims: List[str] = Field(default=["role", "userRole", "custom:role"])
    jwt_roles_claims: List[str] = Field(default=["roles", "groups", "custom:roles"])
    
    # CORS
    cors_origins: str | List[str] = Field(default="http://localhost:3000,http://localhost:5173")
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(default=["*"])
    cors_allow_headers: List[str] = Field(default=["*"])
    
    # Pagination
    default_page_size: int = Field(default=10)
    max_page_size: int = Field(default=100)
    
    # Reports
    default_report_days: int = Field(default=14)
    default_report_months: int = Field(default=6)
    
    # Localization
    timezone: str = Field(default="UTC", description="Timezone used for calendar-day bucketing")
    
    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            if not v or v.strip() == "":
                return list(DEFAULT_CORS_ORIGINS)
            return [origin.strip() for origin in v.split(",")]
        elif v is None:
            return list(DEFAULT_CORS_ORIGINS)
        return v
    
    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject timezone names the zoneinfo database does not know."""
        ZoneInfo(v)
        return v
    
    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"
    
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"
    
    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment.lower() == "testing"
    
    @property
    def tzinfo(self) -> tzinfo:
        """Timezone object for report and date-filter calendar arithmetic."""
        return ZoneInfo(self.timezone)
    
    @property
    def database_url_async(self) -> str:
        """Get async database URL for SQLAlchemy."""
        if self.database_url.startswith("postgresql://"):
            return self.database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
        if self.database_url.startswith("sqlite:///"):
            return self.database_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return self.database_url
    
    def validate_environment(self) -> None:
        """Validate that all required environment variables are set."""
        missing_vars = []
        if not self.jwt_secret_key or self.jwt_secret_key == DEFAULT_JWT_SECRET:
            missing_vars.append("JWT_SECRET_KEY")
        if not self.database_url:
            missing_vars.append("DATABASE_URL")
        
        if missing_vars:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing_vars)}"
            )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Use this function to get settings throughout the application.
    """
    settings = Settings()
    
    # Validate environment in production
    if settings.is_production:
        settings.validate_environment()
    
    return settings


# Create a global settings instance
settings = get_settings()
