"""Registration, login and session endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from supabase import Client

from ..deps import (
    clear_session_cookie,
    get_client,
    get_sessions,
    require_session,
    session_token,
    set_session_cookie,
)
from ...models.domain import UserSession
from ...schemas.auth import AuthResultModel, LoginRequest, RegistrationRequest, SessionModel
from ...services.auth import AuthResult, login_user, logout_user, register_user
from ...services.auth.session import SessionRegistry

router = APIRouter(prefix="/auth", tags=["auth"])


def _start_session(result: AuthResult, sessions: SessionRegistry, response: Response) -> AuthResultModel:
    token = sessions.open(result.user)
    set_session_cookie(response, token)
    return AuthResultModel(success=True, session_token=token)


@router.post("/register", response_model=AuthResultModel, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegistrationRequest,
    response: Response,
    client: Client = Depends(get_client),
    sessions: SessionRegistry = Depends(get_sessions),
) -> AuthResultModel:
    result = register_user(client, payload)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)
    return _start_session(result, sessions, response)


@router.post("/login", response_model=AuthResultModel, status_code=status.HTTP_200_OK)
def login(
    payload: LoginRequest,
    response: Response,
    client: Client = Depends(get_client),
    sessions: SessionRegistry = Depends(get_sessions),
) -> AuthResultModel:
    result = login_user(client, payload.email, payload.password)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=result.error)
    return _start_session(result, sessions, response)


@router.post("/logout", response_model=AuthResultModel, status_code=status.HTTP_200_OK)
def logout(
    response: Response,
    token: Optional[str] = Depends(session_token),
    client: Client = Depends(get_client),
    sessions: SessionRegistry = Depends(get_sessions),
) -> AuthResultModel:
    result = logout_user(client)
    sessions.close(token)
    clear_session_cookie(response)
    return AuthResultModel(success=result.success, error=result.error)


@router.get("/me", response_model=SessionModel, status_code=status.HTTP_200_OK)
def whoami(session: UserSession = Depends(require_session)) -> SessionModel:
    return SessionModel.from_domain(session)
