"""
Request logging middleware untuk SecureAuth API.
Setiap request mendapat request ID (X-Request-ID) dan satu baris access log.
"""

from typing import Callable, Iterable, Optional, Dict, Any
import time
import uuid
import logging

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


logger = logging.getLogger("secureauth.access")

REQUEST_ID_HEADER = "X-Request-ID"


def level_for_status(status_code: Optional[int]) -> int:
    """Log level untuk access log: 5xx error, 4xx warning, sisanya info."""
    if status_code is None or status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Access logging middleware.

    Request body tidak pernah dibaca atau di-log karena Register dan Login
    membawa password. Authorization header juga tidak di-log.
    """

    def __init__(
        self,
        app: ASGIApp,
        exclude_paths: Optional[Iterable[str]] = None
    ):
        """
        Initialize logging middleware.

        Args:
            app: FastAPI/Starlette application
            exclude_paths: Path fragments yang tidak di-log (request ID tetap di-set)
        """
        super().__init__(app)
        self.exclude_paths = tuple(exclude_paths or ("/health",))

    def should_log_path(self, path: str) -> bool:
        return not any(excluded in path for excluded in self.exclude_paths)

    def create_log_entry(
        self,
        request: Request,
        response: Optional[Response],
        duration_ms: float
    ) -> Dict[str, Any]:
        return {
            "request_id": request.state.request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else "unknown",
            "status_code": response.status_code if response else None,
            "duration_ms": round(duration_ms, 2)
        }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.request_id = str(uuid.uuid4())
        start_time = time.perf_counter()
        response = None

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request.state.request_id
            return response
        finally:
            if self.should_log_path(request.url.path):
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.log(
                    level_for_status(response.status_code if response else None),
                    self.create_log_entry(request, response, duration_ms)
                )
