"""User service functions for credential lookup and admin bootstrap."""
from typing import Optional
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from gallery_api.config import BootstrapConfig
from gallery_api.models import User
from gallery_api.utils.auth import hash_password, is_bcrypt_hash

logger = logging.getLogger(__name__)


async def get_user(session: AsyncSession, user_id: int) -> Optional[User]:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_username(session: AsyncSession, username: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def create_user(session: AsyncSession, username: str, password_hash: str) -> User:
    user = User(username=username, password=password_hash)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def ensure_admin_user(session: AsyncSession, config: BootstrapConfig) -> Optional[User]:
    """
    Create the configured admin user if it does not exist yet.

    Runs once at startup. Safe to repeat: an existing username is left as is,
    including when another process created it concurrently.

    Args:
        session: Database session
        config: Startup configuration holding the admin identity

    Returns:
        The admin user, or None when no admin is configured
    """
    username = config.admin_username
    if not username:
        logger.error("ADMIN_USERNAME is not set; no admin user is available")
        return None

    existing = await get_user_by_username(session, username)
    if existing:
        logger.info(f"Admin user '{username}' already exists")
        return existing

    if config.admin_password_hash:
        if not is_bcrypt_hash(config.admin_password_hash):
            logger.error("ADMIN_PASSWORD_HASH is not a bcrypt hash; admin user not created")
            return None
        password_hash = config.admin_password_hash
    elif config.admin_password:
        password_hash = hash_password(config.admin_password)
    else:
        logger.error("ADMIN_PASSWORD is not set; admin user not created")
        return None

    try:
        user = await create_user(session, username, password_hash)
    except IntegrityError:
        await session.rollback()
        logger.info(f"Admin user '{username}' was created by another process")
        return await get_user_by_username(session, username)

    logger.info(f"Admin user '{username}' created successfully")
    return user
