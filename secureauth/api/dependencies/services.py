"""
Service dependencies untuk FastAPI.
Collaborators dibuat sekali oleh application factory dan disimpan di app.state.
"""

from fastapi import Request

from secureauth.services.auth import AuthService


def get_auth_service(request: Request) -> AuthService:
    """
    Dependency untuk mendapatkan AuthService.

    Args:
        request: FastAPI request

    Returns:
        AuthService milik aplikasi
    """
    return request.app.state.auth_service
