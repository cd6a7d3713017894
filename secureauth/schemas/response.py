"""
Response schemas untuk SecureAuth API.
Menangani account projection dan response format yang konsisten.
"""

from datetime import datetime
from typing import Optional, Dict, Any

from pydantic import BaseModel, ConfigDict, Field


class AccountResponse(BaseModel):
    """
    Account projection - subset field yang aman dikirim ke client.
    Tidak pernah berisi password hash.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Account ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email (lowercase)")
    created_at: datetime = Field(..., alias="createdAt", description="Account creation timestamp")


class ProfileAccountResponse(AccountResponse):
    """Account projection untuk Profile, dengan updated_at."""
    updated_at: datetime = Field(..., alias="updatedAt", description="Last update timestamp")


class AuthResponse(BaseModel):
    """
    Response untuk Register dan Login: account projection + bearer token.
    """
    message: str = Field(..., description="Response message")
    token: str = Field(..., description="JWT bearer token")
    token_type: str = Field("bearer", description="Token type (always 'bearer')")
    expires_in: int = Field(..., description="Token lifetime in seconds")
    account: AccountResponse


class ProfileResponse(BaseModel):
    """Response untuk Profile."""
    account: ProfileAccountResponse


class ErrorBody(BaseModel):
    """Isi error envelope."""
    type: str = Field(..., description="Outcome type, e.g. InvalidCredentials")
    message: str = Field(..., description="Client-safe message")
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    """
    Error response schema dengan struktur konsisten.
    Tidak berisi timestamp atau request ID supaya outcome yang sama menghasilkan body yang identik.
    """
    error: ErrorBody

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": {
                    "type": "ValidationFailure",
                    "message": "Validation error",
                    "details": {
                        "errors": [
                            {"field": "email", "message": "Please provide a valid email address"}
                        ]
                    }
                }
            }
        }
    )


class HealthCheckResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    service: str

