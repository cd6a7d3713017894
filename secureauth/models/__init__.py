"""
Models module untuk SecureAuth API.
Berisi semua SQLAlchemy models untuk database.
"""

from secureauth.models.account import Account

__all__ = [
    "Account"
]
