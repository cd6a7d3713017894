"""
Authentication schemas untuk SecureAuth API.
Menangani validasi input untuk registration dan login.
"""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic_core import PydanticCustomError

from secureauth.core.constants import (
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH
)


def _strip(v: Any) -> Any:
    return v.strip() if isinstance(v, str) else v


def _reject_nul(v: str) -> str:
    """bcrypt tidak bisa merepresentasikan NUL, jadi ditolak sebagai input error."""
    if "\x00" in v:
        raise PydanticCustomError(
            "password_nul",
            "Password cannot contain null characters"
        )
    return v


def _check_email_length(v: Any) -> Any:
    """Tolak email lebih dari 254 karakter sebelum validasi syntax."""
    v = _strip(v)
    if isinstance(v, str) and len(v) > EMAIL_MAX_LENGTH:
        raise PydanticCustomError(
            "email_too_long",
            "Email cannot exceed {max_length} characters",
            {"max_length": EMAIL_MAX_LENGTH}
        )
    return v


class EmailPayload(BaseModel):
    """
    Base schema dengan email field.
    Email di-trim, dicek panjangnya, divalidasi, lalu di-lowercase.
    """
    model_config = ConfigDict(extra="ignore")

    email: EmailStr = Field(
        ...,
        description="Email address (case-insensitive)"
    )

    @field_validator('email', mode='before')
    def check_email_length(cls, v: Any) -> Any:
        return _check_email_length(v)

    @field_validator('email')
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower()


class RegisterRequest(EmailPayload):
    """
    Registration request schema.
    Password minimal 8 karakter, maksimal 128.
    """
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "name": "Ann Lee",
                "email": "ann@example.com",
                "password": "correcthorse1"
            }
        }
    )

    name: Annotated[str, Field(
        min_length=NAME_MIN_LENGTH,
        max_length=NAME_MAX_LENGTH
    )] = Field(
        ...,
        description="Display name (2-50 characters)"
    )
    password: Annotated[str, Field(
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH
    )] = Field(
        ...,
        description="Password (8-128 characters)"
    )

    @field_validator('password')
    def check_password_characters(cls, v: str) -> str:
        return _reject_nul(v)

    @field_validator('name', mode='before')
    def strip_name(cls, v: Any) -> Any:
        """Trim whitespace dari name."""
        return _strip(v)


class LoginRequest(EmailPayload):
    """
    Login request schema.
    Password hanya dicek keberadaannya, bukan kekuatannya.
    """
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "email": "ann@example.com",
                "password": "correcthorse1"
            }
        }
    )

    password: Annotated[str, Field(
        min_length=1,
        max_length=PASSWORD_MAX_LENGTH
    )] = Field(
        ...,
        description="Account password"
    )

    @field_validator('password')
    def check_password_characters(cls, v: str) -> str:
        return _reject_nul(v)
