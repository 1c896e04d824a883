"""Pydantic request/response models for auth and profile endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from ..models.domain import Coordinate, UserProfile, UserSession


class CoordinateModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    def to_coordinate(self) -> Coordinate:
        return Coordinate(self.lat, self.lng)

    @classmethod
    def from_coordinate(cls, coordinate: Optional[Coordinate]) -> Optional["CoordinateModel"]:
        if coordinate is None:
            return None
        return cls(lat=coordinate.lat, lng=coordinate.lng)


class RegistrationRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Display name.")
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    phone: str = Field(..., min_length=1)
    role: Literal["customer", "electrician"] = "customer"
    location: Optional[CoordinateModel] = Field(
        default=None, description="Optional service location; electricians get a default point."
    )


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthResultModel(BaseModel):
    success: bool
    error: Optional[str] = None
    session_token: Optional[str] = Field(
        default=None, description="Also set as a cookie; send as a bearer token from non-browser clients."
    )


class ProfileUpdateRequest(BaseModel):
    display_name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, min_length=3)
    phone: Optional[str] = None
    location: Optional[CoordinateModel] = None
    bio: Optional[str] = None
    specialties: Optional[list[str]] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    availability: Optional[bool] = None


class UserProfileModel(BaseModel):
    id: str
    email: str
    display_name: str
    role: Literal["customer", "electrician"]
    photo_url: str = ""
    phone: str = ""
    location: Optional[CoordinateModel] = None
    bio: str = ""
    specialties: list[str] = []
    hourly_rate: Optional[float] = None
    rating: float = 0.0
    rating_count: int = 0
    completed_jobs: int = 0
    experience: int = 0
    availability: Optional[bool] = None
    is_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, profile: UserProfile) -> "UserProfileModel":
        return cls(
            id=profile.id,
            email=profile.email,
            display_name=profile.display_name,
            role=profile.role,
            photo_url=profile.photo_url,
            phone=profile.phone,
            location=CoordinateModel.from_coordinate(profile.location),
            bio=profile.bio,
            specialties=list(profile.specialties),
            hourly_rate=profile.hourly_rate,
            rating=profile.rating,
            rating_count=profile.rating_count,
            completed_jobs=profile.completed_jobs,
            experience=profile.experience,
            availability=profile.availability,
            is_verified=profile.is_verified,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class SessionModel(BaseModel):
    user_id: str
    email: str
    role: Literal["customer", "electrician"]
    profile: UserProfileModel

    @classmethod
    def from_domain(cls, session: UserSession) -> "SessionModel":
        return cls(
            user_id=session.user_id,
            email=session.email,
            role=session.role,
            profile=UserProfileModel.from_domain(session.profile),
        )
