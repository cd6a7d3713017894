"""
Schemas module untuk SecureAuth API.
Berisi semua Pydantic schemas untuk request/response validation.
"""

from secureauth.schemas.auth import (
    RegisterRequest,
    LoginRequest
)
from secureauth.schemas.response import (
    AccountResponse,
    ProfileAccountResponse,
    AuthResponse,
    ProfileResponse,
    ErrorResponse,
    HealthCheckResponse
)

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "AccountResponse",
    "ProfileAccountResponse",
    "AuthResponse",
    "ProfileResponse",
    "ErrorResponse",
    "HealthCheckResponse"
]
