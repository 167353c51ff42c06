"""
Main FastAPI application entry point.
Configures the app, middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from typing import Dict, Any

from timetracker.application.dto.base_dto import HealthCheckResponseDTO
from timetracker.config import settings
from timetracker.infrastructure.db.database import create_all_tables, engine
from timetracker.infrastructure.web.middleware.error_handler import (
    ErrorHandlerMiddleware,
    register_exception_handlers,
)
from timetracker.infrastructure.web.routers import reports, time_entries

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle.
    Setup and teardown operations.
    """
    # Startup
    logger.info(f"Starting {settings.api_title} v{settings.api_version}")
    logger.info(f"Environment: {settings.environment}, timezone: {settings.timezone}")
    
    if settings.database_auto_create:
        await create_all_tables()
    
    yield
    
    # Shutdown
    logger.info("Shutting down application")
    await engine.dispose()


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        debug=settings.debug,
        docs_url=f"{settings.api_prefix}/docs" if settings.debug else None,
        redoc_url=f"{settings.api_prefix}/redoc" if settings.debug else None,
        openapi_url=f"{settings.api_prefix}/openapi.json" if settings.debug else None,
        lifespan=lifespan
    )
    
    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    
    # Add custom error handler middleware
    app.add_middleware(ErrorHandlerMiddleware)
    register_exception_handlers(app)
    
    # Include routers
    app.include_router(
        time_entries.router,
        prefix=f"{settings.api_prefix}/time-entries",
        tags=["Time Tracking"]
    )
    app.include_router(
        reports.router,
        prefix=f"{settings.api_prefix}/reports",
        tags=["Reports"]
    )
    
    # Root endpoint
    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "environment": settings.environment,
            "docs": f"{settings.api_prefix}/docs" if settings.debug else None,
            "health": f"{settings.api_prefix}/health"
        }
    
    # Health check endpoint
    @app.get(f"{settings.api_prefix}/health", response_model=HealthCheckResponseDTO)
    async def health_check() -> HealthCheckResponseDTO:
        """Health check endpoint for monitoring."""
        return HealthCheckResponseDTO(
            status="healthy",
            environment=settings.environment,
            version=settings.api_version
        )
    
    return app


# Create the FastAPI app instance
app = create_application()

if __name__ == "__main__":
    import uvicorn
    
    uvicorn.run(
        "timetracker.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level="debug" if settings.debug else "info",
    )
