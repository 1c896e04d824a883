"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status
from supabase import Client

from ..config import settings
from ..models.domain import UserSession
from ..services.auth.session import SessionRegistry, SessionStore

BEARER_PREFIX = "bearer "


def get_sessions(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_client(sessions: SessionRegistry = Depends(get_sessions)) -> Client:
    if sessions.client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Supabase not configured. Set ENERGYLINK_SUPABASE_URL and ENERGYLINK_SUPABASE_KEY.",
        )
    return sessions.client


def session_token(request: Request) -> Optional[str]:
    """The caller's session token, from the session cookie or a bearer header."""
    header = request.headers.get("authorization", "")
    if header.lower().startswith(BEARER_PREFIX):
        return header[len(BEARER_PREFIX):].strip() or None
    return request.cookies.get(settings.session_cookie_name)


def get_session_store(
    token: Optional[str] = Depends(session_token),
    sessions: SessionRegistry = Depends(get_sessions),
) -> Optional[SessionStore]:
    return sessions.get(token)


def current_session(store: Optional[SessionStore] = Depends(get_session_store)) -> Optional[UserSession]:
    return store.current if store is not None else None


def require_session(session: Optional[UserSession] = Depends(current_session)) -> UserSession:
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in.")
    return session


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        token,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(settings.session_cookie_name)


def client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None
