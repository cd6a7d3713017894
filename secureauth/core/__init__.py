"""
Core module untuk SecureAuth API.
Berisi komponen inti aplikasi seperti konfigurasi, keamanan, exceptions, dan konstanta.
"""

from secureauth.core.config import settings, get_settings, Settings
from secureauth.core.exceptions import (
    SecureAuthException,
    ValidationFailure,
    DuplicateAccount,
    InvalidCredentials,
    AccountNotFound,
    RateLimited,
    MissingCredential,
    InvalidCredential,
    ServerFault,
    ConfigurationError,
    TokenInvalid,
    HashingFailure,
    StoreError,
    UniqueConstraintViolation
)

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "SecureAuthException",
    "ValidationFailure",
    "DuplicateAccount",
    "InvalidCredentials",
    "AccountNotFound",
    "RateLimited",
    "MissingCredential",
    "InvalidCredential",
    "ServerFault",
    "ConfigurationError",
    "TokenInvalid",
    "HashingFailure",
    "StoreError",
    "UniqueConstraintViolation"
]
