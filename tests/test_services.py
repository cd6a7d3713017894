"""
Tests for the account store and the register/login/profile workflows.
"""

import asyncio
from datetime import timezone
from typing import Dict, Optional
from uuid import uuid4

import pytest

from secureauth.core.exceptions import (
    AccountNotFound,
    DuplicateAccount,
    InvalidCredentials,
    RateLimited,
    ServerFault,
    StoreError,
    UniqueConstraintViolation,
    ValidationFailure
)
from secureauth.core.security import CredentialHasher, TokenService
from secureauth.db.session import create_session_factory
from secureauth.models.account import Account
from secureauth.services.account_store import SQLAlchemyAccountStore
from secureauth.services.auth import AuthService
from secureauth.services.rate_limit import FixedWindowRateLimiter


class InMemoryAccountStore:
    """
    Account store di memory dengan unique email.
    create() yield ke event loop sebelum write supaya dua register bisa race.
    """

    def __init__(self):
        self.accounts: Dict[str, Account] = {}

    async def find_by_email(self, email: str) -> Optional[Account]:
        return self.accounts.get(email)

    async def find_by_id(self, account_id: str) -> Optional[Account]:
        for account in self.accounts.values():
            if str(account.id) == account_id:
                return account
        return None

    async def create(self, name: str, email: str, password_hash: str) -> Account:
        await asyncio.sleep(0)
        if email in self.accounts:
            raise UniqueConstraintViolation("email already exists")
        account = Account(id=uuid4(), name=name, email=email, password_hash=password_hash)
        self.accounts[email] = account
        return account


class FailingAccountStore(InMemoryAccountStore):
    """Store yang selalu gagal dengan error I/O."""

    async def find_by_email(self, email: str) -> Optional[Account]:
        raise StoreError("connection refused")


class SlowAccountStore(InMemoryAccountStore):

    async def find_by_email(self, email: str) -> Optional[Account]:
        await asyncio.sleep(1)
        return None


class StalePrecheckStore(SQLAlchemyAccountStore):
    """SQLAlchemy store yang pre-check email-nya selalu kosong, seperti race yang kalah."""

    async def find_by_email(self, email: str) -> Optional[Account]:
        return None


@pytest.mark.asyncio
@pytest.mark.integration
class TestSQLAlchemyAccountStore:
    """Test the SQLAlchemy-backed store."""

    async def test_create_and_find(self, store: SQLAlchemyAccountStore):
        created = await store.create(name="Ann Lee", email="ann@example.com", password_hash="$2b$04$digest")

        by_email = await store.find_by_email("ann@example.com")
        by_id = await store.find_by_id(str(created.id))

        assert by_email.id == created.id
        assert by_id.email == "ann@example.com"
        assert created.created_at is not None
        assert created.updated_at is not None

    async def test_find_missing(self, store: SQLAlchemyAccountStore):
        assert await store.find_by_email("nobody@example.com") is None
        assert await store.find_by_id(str(uuid4())) is None

    async def test_find_by_malformed_id(self, store: SQLAlchemyAccountStore):
        assert await store.find_by_id("not-a-uuid") is None

    async def test_duplicate_email_rejected(self, store: SQLAlchemyAccountStore):
        await store.create(name="Ann Lee", email="ann@example.com", password_hash="$2b$04$digest")

        with pytest.raises(UniqueConstraintViolation):
            await store.create(name="Ann Two", email="ann@example.com", password_hash="$2b$04$other")

    async def test_identifiers_are_unique(self, store: SQLAlchemyAccountStore):
        first = await store.create(name="Ann Lee", email="ann@example.com", password_hash="$2b$04$digest")
        second = await store.create(name="Bob Ray", email="bob@example.com", password_hash="$2b$04$digest")

        assert first.id != second.id


@pytest.mark.asyncio
@pytest.mark.integration
class TestRegister:
    """Test the registration workflow."""

    async def test_register_returns_projection_and_token(
        self,
        auth_service: AuthService,
        tokens: TokenService,
        registration_data
    ):
        result = await auth_service.register({
            "name": "  Ann Lee ",
            "email": "Ann@Example.com",
            "password": "correcthorse1"
        })

        assert result.account["name"] == "Ann Lee"
        assert result.account["email"] == "ann@example.com"
        assert "password" not in result.account
        assert "password_hash" not in result.account
        assert result.expires_in == 3600

        verified = tokens.verify(result.token)
        assert verified.subject == result.account["id"]

    async def test_password_stored_as_digest(
        self,
        auth_service: AuthService,
        store: SQLAlchemyAccountStore,
        hasher: CredentialHasher,
        registration_data
    ):
        await auth_service.register(registration_data)

        account = await store.find_by_email("ann@example.com")

        assert account.password_hash != "correcthorse1"
        assert hasher.verify("correcthorse1", account.password_hash)

    async def test_register_then_login(self, auth_service: AuthService, registration_data):
        registered = await auth_service.register(registration_data)

        logged_in = await auth_service.login({
            "email": "ANN@example.com",
            "password": "correcthorse1"
        })

        assert logged_in.account["id"] == registered.account["id"]

    async def test_duplicate_email(self, auth_service: AuthService, registration_data):
        await auth_service.register(registration_data)

        with pytest.raises(DuplicateAccount):
            await auth_service.register({**registration_data, "email": "ANN@EXAMPLE.COM"})

    async def test_validation_failure_before_store(self, tokens, hasher):
        store = FailingAccountStore()
        service = AuthService(store=store, hasher=hasher, tokens=tokens)

        with pytest.raises(ValidationFailure):
            await service.register({"name": "A", "email": "bad", "password": "x"})

    async def test_concurrent_registration_single_winner(self, tokens, hasher, registration_data):
        """Two concurrent registrations for one email: one succeeds, one is a duplicate."""
        store = InMemoryAccountStore()
        service = AuthService(store=store, hasher=hasher, tokens=tokens)

        results = await asyncio.gather(
            service.register(registration_data),
            service.register({**registration_data, "name": "Ann Two"}),
            return_exceptions=True
        )

        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], DuplicateAccount)
        assert len(store.accounts) == 1

    async def test_store_failure_is_server_fault(self, tokens, hasher, registration_data):
        service = AuthService(store=FailingAccountStore(), hasher=hasher, tokens=tokens)

        with pytest.raises(ServerFault) as exc_info:
            await service.register(registration_data)

        assert "connection refused" not in exc_info.value.message

    async def test_store_timeout_is_server_fault(self, tokens, hasher, registration_data):
        service = AuthService(
            store=SlowAccountStore(),
            hasher=hasher,
            tokens=tokens,
            store_timeout=0.05
        )

        with pytest.raises(ServerFault):
            await service.register(registration_data)

    async def test_shared_rate_limit(self, auth_service: AuthService, registration_data):
        """Register and login share one counter per client."""
        await auth_service.register(registration_data, client_key="auth:10.0.0.1")
        for _ in range(4):
            with pytest.raises(InvalidCredentials):
                await auth_service.login(
                    {"email": "ann@example.com", "password": "wrongpass"},
                    client_key="auth:10.0.0.1"
                )

        with pytest.raises(RateLimited):
            await auth_service.register(
                {**registration_data, "email": "other@example.com"},
                client_key="auth:10.0.0.1"
            )


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.security
class TestLogin:
    """Test the login workflow."""

    async def test_wrong_password(self, auth_service: AuthService, registration_data):
        await auth_service.register(registration_data)

        with pytest.raises(InvalidCredentials) as exc_info:
            await auth_service.login({"email": "ann@example.com", "password": "wrongpass1"})

        assert exc_info.value.message == "Invalid email or password"

    async def test_unknown_email_same_outcome(self, auth_service: AuthService, registration_data):
        await auth_service.register(registration_data)

        with pytest.raises(InvalidCredentials) as wrong_password:
            await auth_service.login({"email": "ann@example.com", "password": "wrongpass1"})
        with pytest.raises(InvalidCredentials) as unknown_email:
            await auth_service.login({"email": "nobody@example.com", "password": "wrongpass1"})

        assert wrong_password.value.message == unknown_email.value.message
        assert wrong_password.value.status_code == unknown_email.value.status_code

    async def test_unknown_email_runs_dummy_verify(self, tokens, registration_data):
        calls = []

        class RecordingHasher(CredentialHasher):
            def dummy_verify(self):
                calls.append("dummy")
                return super().dummy_verify()

        service = AuthService(store=InMemoryAccountStore(), hasher=RecordingHasher(rounds=4), tokens=tokens)

        with pytest.raises(InvalidCredentials):
            await service.login({"email": "nobody@example.com", "password": "whatever1"})

        assert calls == ["dummy"]

    async def test_rate_limited_regardless_of_credentials(
        self,
        auth_service: AuthService,
        registration_data
    ):
        """The sixth attempt is rejected even with correct credentials."""
        await auth_service.register(registration_data)
        for _ in range(5):
            with pytest.raises(InvalidCredentials):
                await auth_service.login(
                    {"email": "ann@example.com", "password": "wrongpass1"},
                    client_key="auth:10.0.0.9"
                )

        with pytest.raises(RateLimited) as exc_info:
            await auth_service.login(
                {"email": "ann@example.com", "password": "correcthorse1"},
                client_key="auth:10.0.0.9"
            )

        assert exc_info.value.retry_after == 900

    async def test_rate_limit_window_reopens(
        self,
        auth_service: AuthService,
        rate_limiter: FixedWindowRateLimiter,
        clock,
        registration_data
    ):
        await auth_service.register(registration_data)
        for _ in range(5):
            await rate_limiter.hit("auth:10.0.0.9")

        clock.advance(15 * 60 + 1)

        result = await auth_service.login(
            {"email": "ann@example.com", "password": "correcthorse1"},
            client_key="auth:10.0.0.9"
        )
        assert result.account["email"] == "ann@example.com"

    async def test_malformed_digest_is_server_fault(self, tokens, hasher):
        store = InMemoryAccountStore()
        await store.create(name="Ann Lee", email="ann@example.com", password_hash="corrupted")
        service = AuthService(store=store, hasher=hasher, tokens=tokens)

        with pytest.raises(ServerFault):
            await service.login({"email": "ann@example.com", "password": "correcthorse1"})


@pytest.mark.asyncio
@pytest.mark.integration
class TestProfile:
    """Test the profile workflow."""

    async def test_profile_refetches_account(self, auth_service: AuthService, registration_data):
        registered = await auth_service.register(registration_data)

        profile = await auth_service.profile(registered.account["id"])

        assert profile["id"] == registered.account["id"]
        assert profile["name"] == "Ann Lee"
        assert profile["email"] == "ann@example.com"
        assert profile["updated_at"] is not None
        assert "password_hash" not in profile

    async def test_missing_account(self, auth_service: AuthService):
        with pytest.raises(AccountNotFound):
            await auth_service.profile(str(uuid4()))


@pytest.mark.asyncio
@pytest.mark.integration
class TestStoreConstraints:
    """Test how database constraint violations surface through the store and workflows."""

    async def test_check_constraint_is_store_error(self, store: SQLAlchemyAccountStore):
        """Only the email unique constraint is reported as a duplicate."""
        with pytest.raises(StoreError) as exc_info:
            await store.create(name="Ann Lee", email="ann@example.com", password_hash="")

        assert not isinstance(exc_info.value, UniqueConstraintViolation)

    async def test_check_constraint_is_server_fault_in_workflow(self, store, tokens, registration_data):
        class EmptyDigestHasher(CredentialHasher):
            def hash(self, plaintext: str) -> str:
                return ""

        service = AuthService(store=store, hasher=EmptyDigestHasher(rounds=4), tokens=tokens)

        with pytest.raises(ServerFault):
            await service.register(registration_data)

    async def test_write_time_conflict_is_duplicate(self, engine, hasher, tokens, registration_data):
        """A unique-index rejection at insert maps to DuplicateAccount."""
        store = StalePrecheckStore(create_session_factory(engine))
        service = AuthService(store=store, hasher=hasher, tokens=tokens)

        await service.register(registration_data)
        with pytest.raises(DuplicateAccount):
            await service.register({**registration_data, "name": "Ann Two"})

    async def test_concurrent_registration_against_database(
        self,
        auth_service: AuthService,
        store: SQLAlchemyAccountStore,
        registration_data
    ):
        """Concurrent registrations for one email leave exactly one account."""
        results = await asyncio.gather(
            auth_service.register(registration_data),
            auth_service.register({**registration_data, "name": "Ann Two"}),
            return_exceptions=True
        )

        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], DuplicateAccount)

        stored = await store.find_by_email("ann@example.com")
        assert str(stored.id) == successes[0].account["id"]


@pytest.mark.asyncio
@pytest.mark.integration
class TestProjectionTimestamps:
    """Test that projections always carry UTC-aware timestamps."""

    async def test_register_and_profile_agree(self, auth_service: AuthService, registration_data):
        registered = await auth_service.register(registration_data)

        profile = await auth_service.profile(registered.account["id"])

        assert registered.account["created_at"].tzinfo is not None
        assert profile["created_at"].tzinfo == timezone.utc
        assert profile["updated_at"].tzinfo == timezone.utc
        assert profile["created_at"] == registered.account["created_at"]
