"""
Pytest configuration and fixtures for SecureAuth API tests.
"""

from datetime import timedelta
from typing import AsyncGenerator, Callable, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine

from secureauth.core.config import Settings
from secureauth.core.security import CredentialHasher, TokenService, utc_now
from secureauth.db.session import close_db, create_engine, create_session_factory, init_db
from secureauth.main import create_application
from secureauth.services.account_store import SQLAlchemyAccountStore
from secureauth.services.auth import AuthService
from secureauth.services.rate_limit import FixedWindowRateLimiter


TEST_SECRET = "test-secret-key-for-secureauth"


class FakeClock:
    """Monotonic clock yang bisa dimajukan manual."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings untuk testing: SQLite file database dan bcrypt cost rendah."""
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        JWT_SECRET_KEY=TEST_SECRET,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        PASSWORD_HASH_ROUNDS=4,
        REDIS_URL=None
    )


@pytest_asyncio.fixture
async def engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine dengan tabel accounts."""
    engine = create_engine(test_settings)
    await init_db(engine, create_tables=True)

    yield engine

    await close_db(engine)


@pytest.fixture
def store(engine: AsyncEngine) -> SQLAlchemyAccountStore:
    return SQLAlchemyAccountStore(create_session_factory(engine))


@pytest.fixture
def hasher() -> CredentialHasher:
    return CredentialHasher(rounds=4)


@pytest.fixture
def tokens(test_settings: Settings) -> TokenService:
    return TokenService.from_settings(test_settings)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_limiter(clock: FakeClock) -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(max_requests=5, window_seconds=900, clock=clock)


@pytest.fixture
def auth_service(
    store: SQLAlchemyAccountStore,
    hasher: CredentialHasher,
    tokens: TokenService,
    rate_limiter: FixedWindowRateLimiter
) -> AuthService:
    return AuthService(
        store=store,
        hasher=hasher,
        tokens=tokens,
        rate_limiter=rate_limiter,
        store_timeout=5.0
    )


@pytest.fixture
def app(
    test_settings: Settings,
    store: SQLAlchemyAccountStore,
    hasher: CredentialHasher,
    tokens: TokenService,
    rate_limiter: FixedWindowRateLimiter
):
    """FastAPI application dengan collaborators test."""
    return create_application(
        test_settings,
        account_store=store,
        rate_limiter=rate_limiter,
        token_service=tokens,
        hasher=hasher
    )


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_token(test_settings: Settings) -> Callable[..., str]:
    """Factory untuk token dengan secret, clock, atau audience tertentu."""
    def _make(subject: str, secret: str = TEST_SECRET, issued_ago: timedelta = timedelta(0), **overrides) -> str:
        service = TokenService(
            secret_key=secret,
            ttl=test_settings.access_token_expire_timedelta,
            issuer=overrides.get("issuer", test_settings.JWT_ISSUER),
            audience=overrides.get("audience", test_settings.JWT_AUDIENCE),
            clock=lambda: utc_now() - issued_ago
        )
        return service.issue(subject)
    return _make


@pytest.fixture
def registration_data() -> Dict[str, str]:
    return {
        "name": "Ann Lee",
        "email": "ann@example.com",
        "password": "correcthorse1"
    }
