"""
Error handling untuk SecureAuth API.
Mengubah domain outcomes dan unhandled exceptions menjadi response yang konsisten.
"""

from typing import Callable, Dict, Optional
import logging

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from secureauth.core.exceptions import (
    InvalidCredential,
    MissingCredential,
    RateLimited,
    SecureAuthException,
    ServerFault
)


# Configure logger
logger = logging.getLogger("secureauth.error")


def create_error_response(exc: SecureAuthException) -> JSONResponse:
    """
    Create standardized error response.

    Body hanya bergantung pada exception, sehingga outcome yang sama selalu
    menghasilkan body yang byte-identical.

    Args:
        exc: Client-visible exception

    Returns:
        JSON error response
    """
    error = {
        "type": exc.error_type,
        "message": exc.message
    }
    if exc.details:
        error["details"] = exc.details

    headers: Dict[str, str] = {
        "X-Content-Type-Options": "nosniff",
        "Cache-Control": "no-store"
    }
    if isinstance(exc, RateLimited):
        headers["Retry-After"] = str(exc.retry_after)
    if isinstance(exc, (MissingCredential, InvalidCredential)):
        headers["WWW-Authenticate"] = "Bearer"

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": error},
        headers=headers
    )


async def secure_auth_exception_handler(
    request: Request,
    exc: SecureAuthException
) -> JSONResponse:
    """Handle SecureAuthException yang di-raise endpoint atau dependency."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.error_type}")
    else:
        logger.debug(f"{request.method} {request.url.path} -> {exc.error_type}")
    return create_error_response(exc)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handler middleware.

    Menangkap semua exception yang lolos dari exception handlers, me-log detail
    lengkap di server, dan mengirim ServerFault tanpa detail ke client.
    """

    def __init__(self, app: ASGIApp, log_errors: bool = True):
        """
        Initialize error handler middleware.

        Args:
            app: FastAPI/Starlette application
            log_errors: Whether to log errors
        """
        super().__init__(app)
        self.log_errors = log_errors

    def log_error(self, request: Request, error: Exception) -> None:
        """
        Log error with context.

        Args:
            request: Request object
            error: Exception
        """
        if not self.log_errors:
            return

        log_entry = {
            "request_id": getattr(request.state, "request_id", "unknown"),
            "method": request.method,
            "path": request.url.path,
            "error_type": type(error).__name__,
            "error_message": str(error),
            "client_ip": request.client.host if request.client else "unknown"
        }
        logger.error(log_entry, exc_info=error)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request dengan error handling.

        Args:
            request: Incoming request
            call_next: Next middleware/endpoint

        Returns:
            Response atau error response
        """
        try:
            return await call_next(request)
        except Exception as exc:
            self.log_error(request, exc)
            return create_error_response(ServerFault())


def register_exception_handlers(app: FastAPI, log_errors: Optional[bool] = True) -> None:
    """
    Pasang exception handler dan error middleware ke aplikasi.

    Args:
        app: FastAPI application
        log_errors: Whether unhandled errors are logged
    """
    app.add_exception_handler(SecureAuthException, secure_auth_exception_handler)
    app.add_middleware(ErrorHandlerMiddleware, log_errors=log_errors)
