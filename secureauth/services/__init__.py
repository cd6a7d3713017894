"""
Services module untuk SecureAuth API.
Berisi business logic layer yang terpisah dari presentation dan data layers.
"""

from secureauth.services.auth import AuthService, AuthResult
from secureauth.services.account_store import AccountStore, SQLAlchemyAccountStore
from secureauth.services.rate_limit import (
    RateLimiter,
    RateLimitDecision,
    FixedWindowRateLimiter,
    RedisFixedWindowRateLimiter
)

__all__ = [
    "AuthService",
    "AuthResult",
    "AccountStore",
    "SQLAlchemyAccountStore",
    "RateLimiter",
    "RateLimitDecision",
    "FixedWindowRateLimiter",
    "RedisFixedWindowRateLimiter"
]
