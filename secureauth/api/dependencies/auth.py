"""
Authentication dependencies untuk FastAPI.
Auth Guard mengekstrak bearer token dari Authorization header dan memverifikasinya.
"""

import logging
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, Optional

from fastapi import Depends, Request

from secureauth.core.constants import AUTHORIZATION_HEADER, BEARER_SCHEME
from secureauth.core.exceptions import InvalidCredential, MissingCredential, TokenInvalid
from secureauth.core.security import TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """Identity yang sudah diverifikasi, diteruskan eksplisit ke workflow berikutnya."""
    subject: str
    claims: Dict[str, Any] = field(default_factory=dict)


def extract_bearer_token(header_value: Optional[str]) -> str:
    """
    Ambil token dari header dengan bentuk persis "Bearer <token>".

    Raises:
        MissingCredential: Jika header tidak ada atau bentuknya salah
    """
    if not header_value:
        raise MissingCredential()

    parts = header_value.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_SCHEME or not parts[1]:
        raise MissingCredential()

    return parts[1]


class AuthGuard:
    """
    Guard untuk protected requests.
    Tidak pernah mengakses account store; re-fetch account adalah keputusan workflow.
    """

    def __init__(self, tokens: TokenService):
        self.tokens = tokens

    def authenticate(self, authorization: Optional[str]) -> AuthenticatedIdentity:
        """
        Verifikasi credential header.

        Args:
            authorization: Nilai Authorization header

        Returns:
            AuthenticatedIdentity dengan verified subject dan claims

        Raises:
            MissingCredential: Header tidak ada atau malformed
            InvalidCredential: Token ditolak (alasan hanya di-log)
        """
        token = extract_bearer_token(authorization)

        try:
            verified = self.tokens.verify(token)
        except TokenInvalid as e:
            logger.debug(f"Bearer token rejected: {e.reason}")
            raise InvalidCredential() from None

        return AuthenticatedIdentity(subject=verified.subject, claims=verified.claims)


def get_auth_guard(request: Request) -> AuthGuard:
    """Dependency untuk mendapatkan AuthGuard dari application state."""
    return request.app.state.auth_guard


async def get_current_identity(
    request: Request,
    guard: Annotated[AuthGuard, Depends(get_auth_guard)]
) -> AuthenticatedIdentity:
    """
    Get verified identity dari Authorization header.

    Args:
        request: FastAPI request
        guard: Auth guard

    Returns:
        AuthenticatedIdentity
    """
    return guard.authenticate(request.headers.get(AUTHORIZATION_HEADER))
