"""
Session-based authentication.

login, logout and current_user work on raw session ids and a SessionStore;
cookie handling stays in the routes.
"""
from typing import Optional, Tuple
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from gallery_api.models import User
from gallery_api.services.users import get_user, get_user_by_username
from gallery_api.utils.auth import burn_password_check, verify_password
from gallery_api.utils.errors import InvalidCredentialsError, UnauthenticatedError
from gallery_api.utils.sessions import SessionStore, session_ttl

logger = logging.getLogger(__name__)


async def login(
    db: AsyncSession,
    store: SessionStore,
    username: str,
    password: str,
) -> Tuple[User, str]:
    """
    Verify credentials and open a session for the user.

    Args:
        db: Database session for the credential lookup
        store: Session store receiving the new session
        username: Submitted username
        password: Submitted plain text password

    Returns:
        (user, session id)

    Raises:
        InvalidCredentialsError: Unknown username or wrong password
    """
    user = await get_user_by_username(db, username)
    if user is None:
        burn_password_check(password)
        logger.warning(f"Login failed: unknown username '{username}'")
        raise InvalidCredentialsError()

    if not verify_password(password, user.password):
        logger.warning(f"Login failed: wrong password for '{username}'")
        raise InvalidCredentialsError()

    sid = await store.create({"user_id": user.id}, session_ttl())
    logger.info(f"User '{username}' logged in")
    return user, sid


async def logout(store: SessionStore, sid: Optional[str]) -> None:
    """Destroy a session. Missing or already expired sessions are not an error."""
    if sid:
        await store.destroy(sid)


async def current_user(db: AsyncSession, store: SessionStore, sid: Optional[str]) -> User:
    """
    Resolve a session id to its user.

    Raises:
        UnauthenticatedError: No session id, unknown or expired session,
            or the user behind it no longer exists
    """
    if not sid:
        raise UnauthenticatedError()

    data = await store.get(sid)
    if not data or "user_id" not in data:
        raise UnauthenticatedError()

    user = await get_user(db, data["user_id"])
    if user is None:
        await store.destroy(sid)
        raise UnauthenticatedError()

    return user
