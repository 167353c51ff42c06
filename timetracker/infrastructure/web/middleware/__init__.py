"""
Web middleware.
"""

from .error_handler import ErrorHandlerMiddleware, register_exception_handlers, raise_for_result

__all__ = ["ErrorHandlerMiddleware", "register_exception_handlers", "raise_for_result"]
