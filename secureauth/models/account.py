"""
Account model untuk SecureAuth API.
Model utama yang merepresentasikan satu registered principal.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import Column, String, UniqueConstraint, CheckConstraint

from secureauth.core.constants import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH
from secureauth.db.base import UUIDModel


UNIQUE_EMAIL_CONSTRAINT = "uq_accounts_email"


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite mengembalikan datetime naive; semua timestamp dianggap UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Account(UUIDModel):
    """
    Account model untuk authentication.

    Attributes:
        id: Unique account ID (UUID, store-assigned, immutable)
        name: Display name (2-50 chars, trimmed)
        email: Email address (unique, lowercase)
        password_hash: bcrypt digest, tidak pernah plaintext
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    __tablename__ = "accounts"

    name = Column(
        String(NAME_MAX_LENGTH),
        nullable=False
    )
    email = Column(
        String(EMAIL_MAX_LENGTH),
        nullable=False,
        index=True
    )
    password_hash = Column(
        String(255),
        nullable=False
    )

    # Constraints
    __table_args__ = (
        UniqueConstraint('email', name=UNIQUE_EMAIL_CONSTRAINT),
        CheckConstraint('length(password_hash) > 0', name='ck_accounts_password_hash_not_empty'),
    )

    def to_projection(self, include_updated: bool = False) -> Dict[str, Any]:
        """
        Convert account ke safe projection (tanpa password hash).

        Args:
            include_updated: Sertakan updated_at (dipakai Profile)

        Returns:
            Account projection dictionary
        """
        data = {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "created_at": _as_utc(self.created_at),
        }

        if include_updated:
            data["updated_at"] = _as_utc(self.updated_at)

        return data

    def __repr__(self) -> str:
        """String representation."""
        return f"<Account(id={self.id}, email={self.email})>"
