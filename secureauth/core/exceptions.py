"""
Custom exceptions untuk SecureAuth API.
Semua outcome yang terlihat oleh client harus inherit dari SecureAuthException.
Exceptions internal (token, hashing, store, config) tidak pernah dikirim ke client.
"""

from typing import Optional, Dict, Any, List

from secureauth.core.constants import ResponseMessage


class SecureAuthException(Exception):
    """Base exception untuk semua client-visible outcomes di SecureAuth API."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize exception.

        Args:
            message: Error message yang aman untuk client
            status_code: HTTP status code
            details: Additional error details
        """
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    @property
    def error_type(self) -> str:
        """Nama outcome yang dikirim di field error.type."""
        return self.__class__.__name__


class ValidationFailure(SecureAuthException):
    """Input client tidak valid. Membawa semua field errors sekaligus."""

    def __init__(
        self,
        errors: List[Dict[str, str]],
        message: str = ResponseMessage.VALIDATION_FAILED
    ):
        self.errors = errors
        super().__init__(message, status_code=400, details={"errors": errors})

    @property
    def messages(self) -> List[str]:
        """Daftar pesan error tanpa nama field."""
        return [error["message"] for error in self.errors]


class DuplicateAccount(SecureAuthException):
    """Email sudah terdaftar."""

    def __init__(self, message: str = ResponseMessage.DUPLICATE_ACCOUNT):
        super().__init__(message, status_code=409)


class InvalidCredentials(SecureAuthException):
    """
    Kredensial login tidak valid.
    Dipakai untuk email tidak dikenal maupun password salah, dengan pesan yang sama.
    """

    def __init__(self):
        super().__init__(ResponseMessage.INVALID_CREDENTIALS, status_code=401)


class AccountNotFound(SecureAuthException):
    """Account pemilik token sudah tidak ada."""

    def __init__(self, message: str = ResponseMessage.ACCOUNT_NOT_FOUND):
        super().__init__(message, status_code=404)


class RateLimited(SecureAuthException):
    """Terlalu banyak request dari client yang sama dalam satu window."""

    def __init__(self, retry_after: int, message: str = ResponseMessage.RATE_LIMITED):
        self.retry_after = retry_after
        super().__init__(message, status_code=429, details={"retry_after": retry_after})


class MissingCredential(SecureAuthException):
    """Authorization header tidak ada atau bukan format 'Bearer <token>'."""

    def __init__(self):
        super().__init__(ResponseMessage.MISSING_CREDENTIAL, status_code=401)


class InvalidCredential(SecureAuthException):
    """Bearer token ditolak. Pesan tidak membedakan penyebabnya."""

    def __init__(self):
        super().__init__(ResponseMessage.INVALID_CREDENTIAL, status_code=401)


class ServerFault(SecureAuthException):
    """Kegagalan infrastruktur yang tidak terduga, dikirim ke client tanpa detail."""

    def __init__(self):
        super().__init__(ResponseMessage.SERVER_FAULT, status_code=500)


# Internal exceptions

class ConfigurationError(Exception):
    """Konfigurasi wajib tidak ada. Fatal saat startup."""


class TokenInvalid(Exception):
    """
    Token gagal diverifikasi.

    Attribute reason hanya untuk logging internal; caller harus memetakan
    semua reason ke outcome yang sama.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class HashingFailure(Exception):
    """Error komputasi hashing atau digest yang malformed."""


class StoreError(Exception):
    """Error I/O dari account store."""


class UniqueConstraintViolation(StoreError):
    """Write ditolak karena akan menduplikasi unique key (email)."""
