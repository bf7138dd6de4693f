"""
Server-side session storage and session token signing.

The stores only know about session ids, payloads and expiry. How the id
travels (cookie, bearer header) is decided by the HTTP layer, which wraps the
id with SessionSigner before handing it to the client.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple
import logging
import secrets

from itsdangerous import BadData, URLSafeSerializer
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from gallery_api.config import settings
from gallery_api.models import SessionRecord

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    """Generate an opaque, unguessable session identifier."""
    return secrets.token_urlsafe(32)


class SessionStore(ABC):
    """Persistence for session payloads with a time-to-live."""

    @abstractmethod
    async def create(self, data: Dict[str, Any], ttl: timedelta) -> str:
        """Persist a payload and return the new session id."""

    @abstractmethod
    async def get(self, sid: str) -> Optional[Dict[str, Any]]:
        """Return the payload for a live session, or None if missing or expired."""

    @abstractmethod
    async def destroy(self, sid: str) -> None:
        """Remove a session. Unknown ids are ignored."""

    @abstractmethod
    async def prune(self) -> int:
        """Delete expired sessions and return how many were removed."""


class DatabaseSessionStore(SessionStore):
    """Session store backed by the sessions table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, data: Dict[str, Any], ttl: timedelta) -> str:
        sid = new_session_id()
        record = SessionRecord(
            sid=sid,
            user_id=data.get("user_id"),
            data=data,
            expires_at=datetime.now(timezone.utc) + ttl,
        )
        self.db.add(record)
        await self.db.commit()
        return sid

    async def get(self, sid: str) -> Optional[Dict[str, Any]]:
        result = await self.db.execute(
            select(SessionRecord.data).where(
                SessionRecord.sid == sid,
                SessionRecord.expires_at > datetime.now(timezone.utc),
            )
        )
        return result.scalar_one_or_none()

    async def destroy(self, sid: str) -> None:
        await self.db.execute(delete(SessionRecord).where(SessionRecord.sid == sid))
        await self.db.commit()

    async def prune(self) -> int:
        result = await self.db.execute(
            delete(SessionRecord).where(SessionRecord.expires_at <= datetime.now(timezone.utc))
        )
        await self.db.commit()
        return result.rowcount or 0


class MemorySessionStore(SessionStore):
    """
    In-process session store.
    Sessions are lost on restart and are not shared between worker processes.
    """

    def __init__(self):
        self._sessions: Dict[str, Tuple[Dict[str, Any], datetime]] = {}

    async def create(self, data: Dict[str, Any], ttl: timedelta) -> str:
        sid = new_session_id()
        self._sessions[sid] = (dict(data), datetime.now(timezone.utc) + ttl)
        return sid

    async def get(self, sid: str) -> Optional[Dict[str, Any]]:
        entry = self._sessions.get(sid)
        if entry is None:
            return None
        data, expires_at = entry
        if expires_at <= datetime.now(timezone.utc):
            self._sessions.pop(sid, None)
            return None
        return dict(data)

    async def destroy(self, sid: str) -> None:
        self._sessions.pop(sid, None)

    async def prune(self) -> int:
        now = datetime.now(timezone.utc)
        expired = [sid for sid, (_, expires_at) in self._sessions.items() if expires_at <= now]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


class SessionSigner:
    """Sign session ids before they leave the server and verify them on the way back."""

    def __init__(self, secret_key: Optional[str] = None, salt: str = "gallery-session"):
        self._serializer = URLSafeSerializer(secret_key or settings.SESSION_SECRET, salt=salt)

    def dumps(self, sid: str) -> str:
        return self._serializer.dumps(sid)

    def loads(self, token: str) -> Optional[str]:
        try:
            sid = self._serializer.loads(token)
        except BadData:
            logger.debug("Rejected session token with a bad signature")
            return None
        return sid if isinstance(sid, str) else None


def session_ttl() -> timedelta:
    return timedelta(hours=settings.SESSION_TTL_HOURS)
