"""Authentication endpoints: login, logout and current user."""
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from gallery_api.config import settings
from gallery_api.database import get_db
from gallery_api.dependencies import get_current_user, get_session_id, get_session_store
from gallery_api.models import User
from gallery_api.schemas import CurrentUserResponse, LoginRequest, LoginResponse, MessageResponse, UserRead
from gallery_api.services import auth
from gallery_api.utils.sessions import SessionSigner, SessionStore

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, sid: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=SessionSigner().dumps(sid),
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        max_age=settings.SESSION_TTL_HOURS * 60 * 60,
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    previous_sid: Optional[str] = Depends(get_session_id),
    db: AsyncSession = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
) -> LoginResponse:
    # A fresh session id on every login; the old one is discarded
    if previous_sid:
        await auth.logout(store, previous_sid)

    user, sid = await auth.login(db, store, payload.username, payload.password)
    _set_session_cookie(response, sid)
    return LoginResponse(message="Login successful", user=UserRead.model_validate(user))


@router.post("/logout", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def logout(
    response: Response,
    sid: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
) -> MessageResponse:
    await auth.logout(store, sid)
    response.delete_cookie(
        settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
) -> CurrentUserResponse:
    return CurrentUserResponse(user=UserRead.model_validate(current_user))
