"""
Middleware module untuk SecureAuth API.
"""

from secureauth.middleware.error_handler import (
    ErrorHandlerMiddleware,
    create_error_response,
    register_exception_handlers
)
from secureauth.middleware.logging import LoggingMiddleware

__all__ = [
    "ErrorHandlerMiddleware",
    "create_error_response",
    "register_exception_handlers",
    "LoggingMiddleware"
]
