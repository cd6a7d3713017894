"""
Konstanta yang digunakan di seluruh aplikasi SecureAuth API.
"""

from enum import Enum


class ValidationSchema(str, Enum):
    """Nama schema input yang dikenal oleh validator."""
    REGISTRATION = "registration"
    LOGIN = "login"


class ResponseMessage:
    """Pesan response yang konsisten dan aman untuk client."""
    # Success messages
    REGISTRATION_SUCCESS = "Registration successful"
    LOGIN_SUCCESS = "Login successful"

    # Error messages
    VALIDATION_FAILED = "Validation error"
    DUPLICATE_ACCOUNT = "Email is already registered"
    INVALID_CREDENTIALS = "Invalid email or password"
    ACCOUNT_NOT_FOUND = "Account not found"
    RATE_LIMITED = "Too many requests. Please try again later."
    MISSING_CREDENTIAL = "Not authenticated"
    INVALID_CREDENTIAL = "Invalid or expired token"
    SERVER_FAULT = "Internal server error"


# Field limits
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 254
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128

# Rate limit key namespace untuk Register dan Login
AUTH_RATE_LIMIT_NAMESPACE = "auth"

# Header untuk bearer credentials
AUTHORIZATION_HEADER = "Authorization"
BEARER_SCHEME = "Bearer"
