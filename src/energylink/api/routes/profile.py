"""Profile endpoints for the signed-in user."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client

from ..deps import get_client, get_session_store, require_session
from ...models.domain import UserSession
from ...schemas.auth import ProfileUpdateRequest, UserProfileModel
from ...schemas.electricians import BioRequest, BioResponse, ElectricianProfileUpdate
from ...services.auth import update_electrician, update_profile
from ...services.auth.session import SessionStore
from ...services.bio import generate_bio

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=UserProfileModel, status_code=status.HTTP_200_OK)
def get_profile(session: UserSession = Depends(require_session)) -> UserProfileModel:
    return UserProfileModel.from_domain(session.profile)


@router.put("", response_model=UserProfileModel, status_code=status.HTTP_200_OK)
def put_profile(
    payload: ProfileUpdateRequest,
    session: UserSession = Depends(require_session),
    client: Client = Depends(get_client),
    store: Optional[SessionStore] = Depends(get_session_store),
) -> UserProfileModel:
    result = update_profile(client, session.user_id, payload)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)
    # require_session guarantees the caller has a store
    store.refresh()
    return UserProfileModel.from_domain((store.current or session).profile)


@router.put("/electrician", status_code=status.HTTP_200_OK)
def put_electrician_profile(
    payload: ElectricianProfileUpdate,
    session: UserSession = Depends(require_session),
    client: Client = Depends(get_client),
) -> dict:
    if not session.is_electrician:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only electricians have a public profile.")
    result = update_electrician(client, session.user_id, payload)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)
    return {"success": True}


@router.post("/bio", response_model=BioResponse, status_code=status.HTTP_200_OK)
def create_bio(payload: BioRequest) -> BioResponse:
    return BioResponse(
        bio=generate_bio(
            name=payload.name,
            experience=payload.experience,
            specialties=payload.specialties,
            hourly_rate=payload.hourly_rate,
            language=payload.language,
        )
    )
