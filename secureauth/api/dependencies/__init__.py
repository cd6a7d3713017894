"""
Dependencies module untuk FastAPI dependency injection.
"""

from secureauth.api.dependencies.auth import (
    AuthGuard,
    AuthenticatedIdentity,
    extract_bearer_token,
    get_auth_guard,
    get_current_identity
)
from secureauth.api.dependencies.rate_limit import client_address, get_auth_rate_limit_key
from secureauth.api.dependencies.services import get_auth_service

__all__ = [
    "AuthGuard",
    "AuthenticatedIdentity",
    "extract_bearer_token",
    "get_auth_guard",
    "get_current_identity",
    "client_address",
    "get_auth_rate_limit_key",
    "get_auth_service"
]
