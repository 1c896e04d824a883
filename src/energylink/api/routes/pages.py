"""Routing surface: page payloads and auth-state redirects.

Each page returns the JSON view model a client renders. Protected pages send
anonymous visitors to ``/login``; ``/login`` and ``/register`` send signed-in
users to ``/dashboard``.
"""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse

from ..deps import client_ip, current_session, get_client, get_sessions
from ...config import settings
from ...models.domain import UserSession
from ...schemas.auth import UserProfileModel
from ...schemas.electricians import DiscoveryResponse, MapPageResponse
from ...services.auth.session import SessionRegistry
from ...services.discovery.pages import discover, render_map

router = APIRouter(tags=["pages"])

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"

SortParam = Optional[Literal["distance", "rating", "price", "jobs"]]

LOGIN_FORM = {
    "page": "login",
    "fields": [
        {"name": "email", "type": "email", "required": True},
        {"name": "password", "type": "password", "required": True},
    ],
    "submit": "/api/auth/login",
}

REGISTER_FORM = {
    "page": "register",
    "fields": [
        {"name": "name", "type": "text", "required": True},
        {"name": "email", "type": "email", "required": True},
        {"name": "password", "type": "password", "required": True, "min_length": 6},
        {"name": "phone", "type": "tel", "required": True},
        {"name": "role", "type": "choice", "choices": ["customer", "electrician"], "default": "customer"},
    ],
    "submit": "/api/auth/register",
}


def _landing(session: Optional[UserSession]) -> RedirectResponse:
    return RedirectResponse(DASHBOARD_PATH if session is not None else LOGIN_PATH)


@router.get("/", include_in_schema=False)
def root_page(session: Optional[UserSession] = Depends(current_session)):
    return _landing(session)


@router.get("/login")
def login_page(session: Optional[UserSession] = Depends(current_session)):
    if session is not None:
        return RedirectResponse(DASHBOARD_PATH)
    return LOGIN_FORM


@router.get("/register")
def register_page(session: Optional[UserSession] = Depends(current_session)):
    if session is not None:
        return RedirectResponse(DASHBOARD_PATH)
    return REGISTER_FORM


@router.get("/dashboard")
async def dashboard_page(
    request: Request,
    q: str = Query(default=""),
    sort: SortParam = Query(default=None),
    lat: float | None = Query(default=None, ge=-90, le=90),
    lng: float | None = Query(default=None, ge=-180, le=180),
    selected: str | None = Query(default=None),
    session: Optional[UserSession] = Depends(current_session),
    sessions: SessionRegistry = Depends(get_sessions),
):
    if session is None:
        return RedirectResponse(LOGIN_PATH)

    if session.is_electrician:
        return {
            "page": "dashboard",
            "role": session.role,
            "profile": UserProfileModel.from_domain(session.profile).model_dump(mode="json"),
        }

    view = await discover(
        get_client(sessions),
        lat=lat,
        lng=lng,
        client_ip=client_ip(request),
        query=q,
        sort=sort,
        selected=selected,
    )
    return {
        "page": "dashboard",
        "role": session.role,
        "discovery": DiscoveryResponse.from_snapshot(view.snapshot()).model_dump(mode="json"),
    }


@router.get("/profile")
def profile_page(session: Optional[UserSession] = Depends(current_session)):
    if session is None:
        return RedirectResponse(LOGIN_PATH)
    return {
        "page": "profile",
        "role": session.role,
        "profile": UserProfileModel.from_domain(session.profile).model_dump(mode="json"),
    }


@router.get("/map")
async def map_page(
    request: Request,
    q: str = Query(default=""),
    lat: float | None = Query(default=None, ge=-90, le=90),
    lng: float | None = Query(default=None, ge=-180, le=180),
    selected: str | None = Query(default=None),
    marker: str | None = Query(default=None, description="Marker id to click"),
    session: Optional[UserSession] = Depends(current_session),
    sessions: SessionRegistry = Depends(get_sessions),
):
    if session is None:
        return RedirectResponse(LOGIN_PATH)
    if not session.is_customer:
        return RedirectResponse(DASHBOARD_PATH)

    page = await render_map(
        get_client(sessions),
        lat=lat,
        lng=lng,
        client_ip=client_ip(request),
        query=q,
        selected=selected,
        marker=marker,
    )
    return MapPageResponse(
        discovery=DiscoveryResponse.from_snapshot(page.discovery.snapshot()),
        map=page.overlay,
        markers_on_map=page.marker_count,
    )


@router.get("/{path:path}", include_in_schema=False)
def fallback_page(path: str, session: Optional[UserSession] = Depends(current_session)):
    api_root = settings.api_prefix.strip("/")
    if path == api_root or path.startswith(f"{api_root}/"):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return _landing(session)
