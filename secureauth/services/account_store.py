"""
Account store untuk SecureAuth API.
Interface yang dipakai auth workflows terhadap persistence layer, plus implementasi SQLAlchemy.
"""

import logging
from typing import Optional, Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from secureauth.core.exceptions import StoreError, UniqueConstraintViolation
from secureauth.models.account import Account, UNIQUE_EMAIL_CONSTRAINT

logger = logging.getLogger(__name__)


def is_email_conflict(error: IntegrityError) -> bool:
    """
    Cek apakah IntegrityError berasal dari unique constraint email.
    PostgreSQL menyebut nama constraint, SQLite menyebut kolomnya.
    """
    message = str(error.orig)
    return UNIQUE_EMAIL_CONSTRAINT in message or "accounts.email" in message


class AccountStore(Protocol):
    """
    Contract account store.

    Uniqueness email di-enforce oleh store; create() raise
    UniqueConstraintViolation jika email sudah ada saat write.
    """

    async def find_by_email(self, email: str) -> Optional[Account]:
        ...

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        ...

    async def create(self, name: str, email: str, password_hash: str) -> Account:
        ...


class SQLAlchemyAccountStore:
    """
    AccountStore di atas SQLAlchemy AsyncSession.
    Setiap operasi memakai session sendiri sehingga aman dipanggil concurrent.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """
        Initialize account store.

        Args:
            session_factory: Factory untuk AsyncSession
        """
        self.session_factory = session_factory

    async def find_by_email(self, email: str) -> Optional[Account]:
        """
        Cari account berdasarkan email (sudah dinormalisasi lowercase).

        Raises:
            StoreError: Jika query gagal
        """
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(Account).where(Account.email == email)
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreError("find_by_email failed") from e

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        """
        Cari account berdasarkan ID.
        ID yang bukan UUID valid dianggap tidak ditemukan.

        Raises:
            StoreError: Jika query gagal
        """
        try:
            key = UUID(str(account_id))
        except ValueError:
            return None

        try:
            async with self.session_factory() as session:
                return await session.get(Account, key)
        except SQLAlchemyError as e:
            raise StoreError("find_by_id failed") from e

    async def create(self, name: str, email: str, password_hash: str) -> Account:
        """
        Create account baru secara atomik terhadap unique index email.

        Returns:
            Account yang baru dibuat

        Raises:
            UniqueConstraintViolation: Jika email sudah ada
            StoreError: Untuk kegagalan database lainnya
        """
        account = Account(
            name=name,
            email=email,
            password_hash=password_hash
        )

        async with self.session_factory() as session:
            session.add(account)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                if not is_email_conflict(e):
                    raise StoreError("create rejected by integrity constraint") from e
                logger.info("Unique constraint rejected account insert")
                raise UniqueConstraintViolation("email already exists") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise StoreError("create failed") from e

        return account
