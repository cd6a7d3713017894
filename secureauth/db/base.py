"""
Base model untuk SQLAlchemy.
Model account inherit dari UUIDModel untuk identifier dan timestamps.
"""

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, DateTime, Uuid
from sqlalchemy.orm import as_declarative, declared_attr


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@as_declarative()
class Base:
    """Declarative base untuk semua SQLAlchemy models."""


class BaseModel(Base):
    """
    Abstract base model dengan created_at dan updated_at.
    Kedua timestamp di-assign di aplikasi (UTC), updated_at di-bump pada setiap UPDATE.
    """
    __abstract__ = True

    created_at = Column(
        DateTime(timezone=True),
        default=_utc_now,
        nullable=False,
        index=True
    )

    updated_at = Column(
        DateTime(timezone=True),
        default=_utc_now,
        onupdate=_utc_now,
        nullable=False
    )

    @declared_attr
    def __mapper_args__(cls):
        # Timestamps langsung terbaca setelah flush tanpa SELECT ulang
        return {"eager_defaults": True}


class UUIDModel(BaseModel):
    """
    Base model dengan UUID primary key.
    Identifier di-assign sekali saat insert dan tidak pernah dipakai ulang.
    Tipe Uuid portable, jadi model yang sama jalan di PostgreSQL dan SQLite.
    """
    __abstract__ = True

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False
    )
