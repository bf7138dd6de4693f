"""
Database connection and session management for SQLAlchemy 2.0.
Configured for async operations with PostgreSQL (asyncpg) or SQLite (aiosqlite).
"""
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy import text
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from urllib.parse import urlparse
from typing import Optional
import logging

from gallery_api.config import settings, BootstrapConfig

logger = logging.getLogger(__name__)

# Create declarative base for models
Base = declarative_base()

SUPPORTED_SCHEMES = ("postgresql+asyncpg", "sqlite+aiosqlite")

# Pool settings only apply to PostgreSQL (not SQLite)
_engine_args = {
    "echo": False,  # Set to True for SQL query logging in development
}

if settings.DATABASE_URL.startswith("postgresql"):
    _engine_args.update({
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,  # Verify connections before using
        "pool_recycle": 3600,
        "connect_args": {
            "server_settings": {
                "application_name": "media-gallery-api"
            }
        }
    })

engine = create_async_engine(settings.DATABASE_URL, **_engine_args)

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

    Usage:
        @router.get("/endpoint")
        async def my_endpoint(db: AsyncSession = Depends(get_db)):
            # Use db session here
            pass
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except (HTTPException, RequestValidationError):
            # Expected API errors (400, 401, 404) - nothing to log
            await session.rollback()
            raise
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
    except ValueError as e:
        return False, f"Error parsing DATABASE_URL: {str(e)}"

    if parsed.scheme not in SUPPORTED_SCHEMES:
        return False, (
            f"Invalid database URL scheme. Expected one of {', '.join(SUPPORTED_SCHEMES)}, "
            f"got: {parsed.scheme}"
        )

    if parsed.scheme.startswith("sqlite"):
        return True, f"URL format valid. SQLite database: {parsed.path or ':memory:'}"

    if not parsed.hostname:
        return False, "No hostname found in DATABASE_URL"

    return True, (
        f"URL format valid. Hostname: {parsed.hostname}, Port: {parsed.port or 5432}, "
        f"Database: {parsed.path or '/postgres'}"
    )


async def init_db(config: Optional[BootstrapConfig] = None):
    """
    Initialize the database on application startup.

    Creates missing tables, prunes expired sessions, bootstraps the admin
    user and seeds the sample collection. Each step is idempotent.

    Args:
        config: Explicit startup configuration (admin identity, seeding)
    """
    # Imported here: these modules depend on the models, which depend on Base
    from gallery_api import models  # noqa: F401  (register tables on Base.metadata)
    from gallery_api.services.seed import seed_gallery
    from gallery_api.services.storage import DatabaseGalleryStorage
    from gallery_api.services.users import ensure_admin_user
    from gallery_api.utils.sessions import DatabaseSessionStore

    config = config or BootstrapConfig()

    is_valid, diagnostic = _validate_database_url(settings.DATABASE_URL)
    if not is_valid:
        logger.error(f"Invalid DATABASE_URL: {diagnostic}")
        raise ValueError(f"Invalid DATABASE_URL: {diagnostic}")

    logger.info(f"Database URL validation: {diagnostic}")

    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema is up to date")

    async with AsyncSessionLocal() as session:
        pruned = await DatabaseSessionStore(session).prune()
        if pruned:
            logger.info(f"Pruned {pruned} expired session(s)")

        await ensure_admin_user(session, config)

        if config.seed_gallery:
            await seed_gallery(DatabaseGalleryStorage(session))


async def close_db():
    """
    Close database connections.
    Used by the shutdown event.
    """
    await engine.dispose()
    logger.info("Database connections closed")
