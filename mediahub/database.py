"""
Database connection and session management for SQLAlchemy 2.0.
Configured for async operations with PostgreSQL, falling back to an
in-memory SQLite database when DATABASE_URL is not set.
"""
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool
from sqlalchemy import text
from urllib.parse import urlparse
import logging
import socket

from mediahub.config import settings

logger = logging.getLogger(__name__)

# Create declarative base for models
Base = declarative_base()

SQLITE_MEMORY_URL = "sqlite+aiosqlite:///:memory:"

_engine_args = {
    "echo": False,  # Set to True for SQL query logging in development
}

if settings.DATABASE_URL and settings.DATABASE_URL.startswith("postgresql"):
    _engine_args.update({
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,  # Verify connections before using (handles stale connections)
        "pool_recycle": 3600,
        "connect_args": {
            "server_settings": {
                "application_name": "mediahub-backend"
            }
        }
    })
elif not settings.DATABASE_URL:
    # A single shared connection, otherwise every session sees its own empty database
    _engine_args.update({
        "poolclass": StaticPool,
        "connect_args": {"check_same_thread": False},
    })

engine = create_async_engine(
    settings.DATABASE_URL if settings.DATABASE_URL else SQLITE_MEMORY_URL,
    **_engine_args
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncSession:
    """
    FastAPI dependency for database sessions.
    Provides async database session with automatic commit/rollback.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error(f"Database session error: {str(e)}", exc_info=True)
            raise
        finally:
            await session.close()


def _validate_database_url(url: str) -> tuple[bool, str]:
    """
    Validate database URL and provide diagnostic information.
    Returns (is_valid, diagnostic_message)
    """
    if not url:
        return False, "DATABASE_URL is empty"

    try:
        parsed = urlparse(url)

        if not url.startswith(("postgresql://", "postgresql+asyncpg://")):
            return False, f"Invalid database URL scheme. Expected postgresql:// or postgresql+asyncpg://, got: {parsed.scheme}"

        hostname = parsed.hostname
        if not hostname:
            return False, "No hostname found in DATABASE_URL"

        try:
            socket.getaddrinfo(hostname, None)
            dns_status = "DNS resolution successful"
        except socket.gaierror as e:
            dns_status = f"DNS resolution failed: {str(e)}"

        return True, f"URL format valid. Hostname: {hostname}, Port: {parsed.port or 5432}, Database: {parsed.path or '/postgres'}. {dns_status}"

    except Exception as e:
        return False, f"Error parsing DATABASE_URL: {str(e)}"


async def init_db():
    """
    Initialize database connection.
    Without DATABASE_URL the in-memory SQLite schema is created from the models;
    PostgreSQL schemas are managed by Alembic.
    """
    if not settings.DATABASE_URL:
        # Import models so they are registered on Base.metadata
        from mediahub import models  # noqa: F401

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.warning("DATABASE_URL not set, using in-memory SQLite database")
        return

    is_valid, diagnostic = _validate_database_url(settings.DATABASE_URL)
    if not is_valid:
        logger.error(f"Invalid DATABASE_URL: {diagnostic}")
        raise ValueError(f"Invalid DATABASE_URL: {diagnostic}")

    logger.info(f"Database URL validation: {diagnostic}")

    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            logger.info("Database connection initialized successfully")
    except Exception as e:
        logger.error(
            f"Database connection failed ({type(e).__name__}): {str(e)}\n"
            f"Diagnostic: {diagnostic}"
        )
        raise


async def close_db():
    """Close database connections on shutdown."""
    await engine.dispose()
    logger.info("Database connections closed")
