"""Reusable dependencies for FastAPI routes."""
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from gallery_api.config import settings
from gallery_api.database import get_db
from gallery_api.models import User
from gallery_api.services import auth
from gallery_api.services.storage import DatabaseGalleryStorage, GalleryStorage
from gallery_api.utils.sessions import (
    DatabaseSessionStore,
    MemorySessionStore,
    SessionSigner,
    SessionStore,
)

# Used when SESSION_BACKEND=memory; lives as long as the process
_memory_session_store = MemorySessionStore()


async def get_gallery_storage(db: AsyncSession = Depends(get_db)) -> GalleryStorage:
    return DatabaseGalleryStorage(db)


async def get_session_store(db: AsyncSession = Depends(get_db)) -> SessionStore:
    if settings.SESSION_BACKEND == "memory":
        return _memory_session_store
    return DatabaseSessionStore(db)


def get_session_id(
    request: Request,
    authorization: Optional[str] = Header(None, description="Bearer session token (fallback to cookie)"),
) -> Optional[str]:
    """
    Extract the session id from the request.
    Reads the signed token from the session cookie (preferred) or an
    Authorization: Bearer header, and returns the verified session id.
    """
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)

    if not token and authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            token = parts[1]

    if not token:
        return None

    return SessionSigner().loads(token)


async def get_current_user(
    sid: Optional[str] = Depends(get_session_id),
    db: AsyncSession = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
) -> User:
    """
    Guard for authenticated routes.
    Raises UnauthenticatedError (401) before the route body runs.
    """
    return await auth.current_user(db, store, sid)
