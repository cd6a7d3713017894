"""
Main application entry point untuk SecureAuth API.
Mengkonfigurasi FastAPI application dengan middleware, routers, dan collaborators.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from secureauth.api.dependencies.auth import AuthGuard
from secureauth.api.routes import auth, health
from secureauth.core.config import Settings, get_settings
from secureauth.core.exceptions import ConfigurationError
from secureauth.core.security import CredentialHasher, TokenService
from secureauth.db.session import close_db, create_engine, create_session_factory, init_db
from secureauth.middleware.error_handler import register_exception_handlers
from secureauth.middleware.logging import LoggingMiddleware
from secureauth.services.account_store import AccountStore, SQLAlchemyAccountStore
from secureauth.services.auth import AuthService
from secureauth.services.rate_limit import (
    FixedWindowRateLimiter,
    RateLimiter,
    RedisFixedWindowRateLimiter
)

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging dari settings."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format=settings.LOG_FORMAT
    )


def build_rate_limiter(settings: Settings) -> RateLimiter:
    """
    Build limiter untuk Register dan Login.
    Redis dipakai jika REDIS_URL di-set, selain itu in-process limiter.
    """
    if settings.REDIS_URL:
        logger.info("Using Redis rate limiter")
        return RedisFixedWindowRateLimiter.from_url(
            settings.REDIS_URL,
            max_requests=settings.AUTH_RATE_LIMIT_MAX_REQUESTS,
            window_seconds=settings.AUTH_RATE_LIMIT_WINDOW_SECONDS
        )

    return FixedWindowRateLimiter(
        max_requests=settings.AUTH_RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.AUTH_RATE_LIMIT_WINDOW_SECONDS
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    settings: Settings = app.state.settings
    engine = app.state.engine

    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    if engine is not None:
        await init_db(engine, create_tables=settings.DB_AUTO_CREATE_TABLES)

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application")

    limiter = app.state.rate_limiter
    if isinstance(limiter, RedisFixedWindowRateLimiter):
        await limiter.close()

    if engine is not None:
        await close_db(engine)

    logger.info("Application shutdown complete")


def create_application(
    settings: Optional[Settings] = None,
    *,
    account_store: Optional[AccountStore] = None,
    rate_limiter: Optional[RateLimiter] = None,
    token_service: Optional[TokenService] = None,
    hasher: Optional[CredentialHasher] = None
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Collaborator yang tidak di-inject dibangun dari settings.

    Args:
        settings: Application settings (default: get_settings())
        account_store: Account store
        rate_limiter: Limiter untuk Register dan Login
        token_service: Token service
        hasher: Credential hasher

    Returns:
        Configured FastAPI application

    Raises:
        ConfigurationError: Jika signing secret tidak di-set
    """
    settings = settings or get_settings()
    configure_logging(settings)

    token_service = token_service or TokenService.from_settings(settings)
    if not token_service.is_configured:
        raise ConfigurationError("JWT_SECRET_KEY must be set before the application starts")

    engine = None
    if account_store is None:
        engine = create_engine(settings)
        account_store = SQLAlchemyAccountStore(create_session_factory(engine))

    hasher = hasher or CredentialHasher(rounds=settings.PASSWORD_HASH_ROUNDS)
    rate_limiter = rate_limiter or build_rate_limiter(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Bearer credentials for username/password login",
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,  # Disable in production
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.rate_limiter = rate_limiter
    app.state.auth_guard = AuthGuard(token_service)
    app.state.auth_service = AuthService(
        store=account_store,
        hasher=hasher,
        tokens=token_service,
        rate_limiter=rate_limiter,
        store_timeout=settings.STORE_TIMEOUT_SECONDS
    )

    # Middleware order: yang ditambahkan terakhir dieksekusi pertama
    register_exception_handlers(app)
    app.add_middleware(LoggingMiddleware, exclude_paths=["/health"])

    app.include_router(health.router, prefix=settings.API_PREFIX)
    app.include_router(auth.router, prefix=settings.API_PREFIX)

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        create_application(settings),
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower()
    )
