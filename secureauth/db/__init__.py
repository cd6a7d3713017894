"""
Database module untuk SecureAuth API.
Berisi base model, session management, dan konfigurasi database.
"""

from secureauth.db.base import Base, BaseModel, UUIDModel
from secureauth.db.session import (
    create_engine,
    create_session_factory,
    init_db,
    close_db
)

__all__ = [
    "Base",
    "BaseModel",
    "UUIDModel",
    "create_engine",
    "create_session_factory",
    "init_db",
    "close_db"
]
