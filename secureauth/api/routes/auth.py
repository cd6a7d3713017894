"""
Authentication endpoints.
Register dan Login adalah public (rate limited); Profile memerlukan bearer token.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, status

from secureauth.api.dependencies.auth import AuthenticatedIdentity, get_current_identity
from secureauth.api.dependencies.rate_limit import get_auth_rate_limit_key
from secureauth.api.dependencies.services import get_auth_service
from secureauth.schemas.response import (
    AccountResponse,
    AuthResponse,
    ErrorResponse,
    ProfileAccountResponse,
    ProfileResponse
)
from secureauth.services.auth import AuthResult, AuthService

router = APIRouter(prefix="/auth", tags=["authentication"])


async def read_json_body(request: Request) -> Any:
    """
    Baca JSON body. Body yang bukan JSON valid dikembalikan sebagai None
    sehingga validator melaporkannya sebagai ValidationFailure.
    """
    try:
        return await request.json()
    except ValueError:
        return None


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        message=result.message,
        token=result.token,
        expires_in=result.expires_in,
        account=AccountResponse(**result.account)
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
    }
)
async def register(
    payload: Annotated[Any, Depends(read_json_body)],
    client_key: Annotated[str, Depends(get_auth_rate_limit_key)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)]
) -> AuthResponse:
    """
    Register account baru.

    Body: {name, email, password}. Mengembalikan account projection dan token
    supaya client bisa langsung login.
    """
    result = await auth_service.register(payload, client_key=client_key)
    return _auth_response(result)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
    }
)
async def login(
    payload: Annotated[Any, Depends(read_json_body)],
    client_key: Annotated[str, Depends(get_auth_rate_limit_key)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)]
) -> AuthResponse:
    """
    Login dengan email dan password.

    Email tidak dikenal dan password salah menghasilkan response yang identik.
    """
    result = await auth_service.login(payload, client_key=client_key)
    return _auth_response(result)


@router.get(
    "/profile",
    response_model=ProfileResponse,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    }
)
async def profile(
    identity: Annotated[AuthenticatedIdentity, Depends(get_current_identity)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)]
) -> ProfileResponse:
    """
    Get profile untuk account pemilik bearer token.
    Account selalu di-fetch ulang dari store, bukan dari claims token.
    """
    account = await auth_service.profile(identity.subject)
    return ProfileResponse(account=ProfileAccountResponse(**account))
