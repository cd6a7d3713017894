"""
Rate limiting dependencies untuk FastAPI.
Menentukan client key yang dipakai limiter untuk public credential endpoints.
"""

from fastapi import Request

from secureauth.core.constants import AUTH_RATE_LIMIT_NAMESPACE


def client_address(request: Request) -> str:
    """
    Alamat client dari koneksi.

    Args:
        request: FastAPI request

    Returns:
        IP address atau "unknown"
    """
    return request.client.host if request.client else "unknown"


def get_auth_rate_limit_key(request: Request) -> str:
    """
    Key rate limit untuk Register dan Login.
    Kedua endpoint berbagi satu counter per client.

    Args:
        request: FastAPI request

    Returns:
        Rate limit key
    """
    return f"{AUTH_RATE_LIMIT_NAMESPACE}:{client_address(request)}"
