"""
Global error handler middleware for the FastAPI application.
Catches and formats all exceptions consistently.
"""

import logging
import traceback
from typing import Any, Dict, Optional
from fastapi import FastAPI, HTTPException, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from timetracker.application.use_cases.base_use_case import UseCaseResult
from timetracker.config import settings
from timetracker.domain.models.base import DomainException

logger = logging.getLogger(__name__)


STATUS_BY_ERROR_CODE = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "UNEXPECTED_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

ERROR_NAMES = {
    status.HTTP_400_BAD_REQUEST: "Bad Request",
    status.HTTP_403_FORBIDDEN: "Forbidden",
    status.HTTP_404_NOT_FOUND: "Not Found",
    status.HTTP_409_CONFLICT: "Conflict",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "Internal Server Error",
}


def status_for_code(error_code: Optional[str]) -> int:
    return STATUS_BY_ERROR_CODE.get(error_code or "", status.HTTP_500_INTERNAL_SERVER_ERROR)


def raise_for_result(result: UseCaseResult) -> Any:
    """
    Unwrap a use case result for a router.
    Returns the data on success, raises HTTPException otherwise.
    """
    if result.success:
        return result.data
    
    raise HTTPException(
        status_code=status_for_code(result.error_code),
        detail=result.error or "An unexpected error occurred"
    )


def format_domain_error(exc: DomainException) -> Dict[str, Any]:
    status_code = status_for_code(exc.code)
    message = exc.message
    if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        message = "An unexpected error occurred"
    return {
        "error": ERROR_NAMES[status_code],
        "message": message,
        "status_code": status_code
    }


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle all uncaught exceptions and format error responses.
    """
    
    async def dispatch(self, request: Request, call_next):
        """
        Process the request and handle any exceptions.
        """
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            return await self.handle_exception(request, exc)
    
    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        """
        Log the exception and return a JSON error envelope.
        """
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                "request_path": request.url.path,
                "request_method": request.method,
                "client_host": request.client.host if request.client else None
            }
        )
        
        error_response = self.format_error_response(exc)
        
        # In development, add more debug information
        if settings.debug:
            error_response["debug"] = {
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc().split("\n")
            }
        
        return JSONResponse(
            status_code=error_response.get("status_code", 500),
            content=error_response
        )
    
    def format_error_response(self, exc: Exception) -> Dict[str, Any]:
        """
        Format exception into a consistent error response structure.
        """
        if isinstance(exc, DomainException):
            return format_domain_error(exc)
        
        return {
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR
        }


def register_exception_handlers(app: FastAPI) -> None:
    """Render domain exceptions that escape the use cases with the same envelope."""
    
    @app.exception_handler(DomainException)
    async def handle_domain_exception(request: Request, exc: DomainException) -> JSONResponse:
        body = format_domain_error(exc)
        if body["status_code"] >= 500:
            logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
        else:
            logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=body["status_code"], content=body)
