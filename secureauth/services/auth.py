"""
Authentication service untuk SecureAuth API.
Menangani business logic untuk register, login, dan profile.
"""

import asyncio
import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, TypeVar

from starlette.concurrency import run_in_threadpool

from secureauth.core.constants import ResponseMessage, ValidationSchema
from secureauth.core.exceptions import (
    AccountNotFound,
    DuplicateAccount,
    InvalidCredentials,
    RateLimited,
    SecureAuthException,
    ServerFault,
    StoreError,
    UniqueConstraintViolation
)
from secureauth.core.security import CredentialHasher, TokenService
from secureauth.models.account import Account
from secureauth.services.account_store import AccountStore
from secureauth.services.rate_limit import RateLimiter
from secureauth.utils.validators import validate_payload

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class AuthResult:
    """Hasil Register/Login yang berhasil."""
    message: str
    token: str
    expires_in: int
    account: Dict[str, Any]


def workflow_boundary(name: str):
    """
    Decorator untuk workflow methods.

    Domain outcomes (SecureAuthException) diteruskan apa adanya. Error lain
    di-log lengkap di server lalu diganti ServerFault tanpa detail.
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except SecureAuthException:
                raise
            except Exception as e:
                logger.exception(f"Unexpected error in {name} workflow: {e!r}")
                raise ServerFault() from e
        return wrapper
    return decorator


class AuthService:
    """
    Service class untuk authentication workflows.
    Mengorkestrasi validator, hasher, token service, account store, dan rate limiter.
    """

    def __init__(
        self,
        store: AccountStore,
        hasher: CredentialHasher,
        tokens: TokenService,
        rate_limiter: Optional[RateLimiter] = None,
        store_timeout: float = 5.0
    ):
        """
        Initialize authentication service.

        Args:
            store: Account store
            hasher: Credential hasher
            tokens: Token service
            rate_limiter: Limiter untuk Register dan Login (optional)
            store_timeout: Deadline untuk setiap akses store, dalam detik
        """
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self.rate_limiter = rate_limiter
        self.store_timeout = store_timeout

    async def _store_call(self, awaitable: Awaitable[T]) -> T:
        """Jalankan operasi store dengan deadline."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self.store_timeout)
        except asyncio.TimeoutError as e:
            raise StoreError("account store timed out") from e

    async def _enforce_rate_limit(self, client_key: Optional[str]) -> None:
        """
        Check rate limit untuk client.

        Raises:
            RateLimited: Jika ceiling terlampaui dalam window aktif
        """
        if self.rate_limiter is None or client_key is None:
            return

        decision = await self.rate_limiter.hit(client_key)
        if not decision.allowed:
            logger.warning(f"Rate limit exceeded for {client_key}")
            raise RateLimited(retry_after=decision.retry_after_seconds)

    def _issue_token(self, account: Account) -> str:
        return self.tokens.issue(
            subject=str(account.id),
            claims={
                "name": account.name,
                "email": account.email
            }
        )

    def _result(self, message: str, account: Account) -> AuthResult:
        return AuthResult(
            message=message,
            token=self._issue_token(account),
            expires_in=int(self.tokens.ttl.total_seconds()),
            account=account.to_projection()
        )

    @workflow_boundary("register")
    async def register(
        self,
        payload: Mapping[str, Any],
        client_key: Optional[str] = None
    ) -> AuthResult:
        """
        Register account baru.

        Proses:
        1. Rate limit per client
        2. Validasi input (semua errors sekaligus)
        3. Cek duplikasi email
        4. Hash password dan create account (unique index sebagai sumber kebenaran)
        5. Issue token

        Args:
            payload: {name, email, password}
            client_key: Rate limit key untuk client

        Returns:
            AuthResult dengan token dan account projection

        Raises:
            RateLimited: Jika rate limit terlampaui
            ValidationFailure: Jika input tidak valid
            DuplicateAccount: Jika email sudah terdaftar
            ServerFault: Untuk kegagalan infrastruktur
        """
        await self._enforce_rate_limit(client_key)

        data = validate_payload(payload, ValidationSchema.REGISTRATION)

        existing = await self._store_call(self.store.find_by_email(data.email))
        if existing is not None:
            logger.info("Registration rejected: email already registered")
            raise DuplicateAccount()

        password_hash = await run_in_threadpool(self.hasher.hash, data.password)

        try:
            account = await self._store_call(
                self.store.create(
                    name=data.name,
                    email=data.email,
                    password_hash=password_hash
                )
            )
        except UniqueConstraintViolation:
            # Registrasi concurrent dengan email sama menang lebih dulu
            logger.info("Registration rejected at write time: email already registered")
            raise DuplicateAccount() from None

        logger.info(f"Account registered: {account.id}")
        return self._result(ResponseMessage.REGISTRATION_SUCCESS, account)

    @workflow_boundary("login")
    async def login(
        self,
        payload: Mapping[str, Any],
        client_key: Optional[str] = None
    ) -> AuthResult:
        """
        Authenticate account dengan email dan password.

        Email tidak dikenal dan password salah menghasilkan InvalidCredentials
        yang identik, dan keduanya menjalankan satu verifikasi bcrypt.

        Args:
            payload: {email, password}
            client_key: Rate limit key untuk client

        Returns:
            AuthResult dengan token dan account projection

        Raises:
            RateLimited: Jika rate limit terlampaui
            ValidationFailure: Jika input tidak valid
            InvalidCredentials: Jika kredensial tidak valid
            ServerFault: Untuk kegagalan infrastruktur
        """
        await self._enforce_rate_limit(client_key)

        data = validate_payload(payload, ValidationSchema.LOGIN)

        account = await self._store_call(self.store.find_by_email(data.email))

        if account is None:
            await run_in_threadpool(self.hasher.dummy_verify)
            logger.info("Login failed: invalid credentials")
            raise InvalidCredentials()

        if not await run_in_threadpool(self.hasher.verify, data.password, account.password_hash):
            logger.info(f"Login failed: invalid credentials for account {account.id}")
            raise InvalidCredentials()

        logger.info(f"Login successful: {account.id}")
        return self._result(ResponseMessage.LOGIN_SUCCESS, account)

    @workflow_boundary("profile")
    async def profile(self, subject: str) -> Dict[str, Any]:
        """
        Ambil profile account untuk subject yang sudah diverifikasi Auth Guard.

        Args:
            subject: Account ID dari token

        Returns:
            Account projection dengan updated_at

        Raises:
            AccountNotFound: Jika account sudah tidak ada
            ServerFault: Untuk kegagalan infrastruktur
        """
        account = await self._store_call(self.store.find_by_id(subject))
        if account is None:
            logger.info(f"Profile requested for missing account {subject}")
            raise AccountNotFound()

        return account.to_projection(include_updated=True)
