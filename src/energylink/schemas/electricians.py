"""Electrician directory and discovery API schemas."""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field

from .auth import CoordinateModel
from ..models.domain import ElectricianProfile
from ..services.discovery import DiscoveryEntry


class ElectricianModel(BaseModel):
    id: str
    display_name: str
    email: str = ""
    phone: str = ""
    photo_url: str = ""
    bio: str = ""
    hourly_rate: float
    rating: float
    rating_count: int = 0
    completed_jobs: int
    specialties: list[str]
    languages: list[str] = []
    location: Optional[CoordinateModel] = None
    response_time: str
    experience: int = 0
    availability: bool = True
    is_verified: bool = False
    address: str = ""
    service_radius_km: float = 20.0

    @classmethod
    def from_domain(cls, profile: ElectricianProfile) -> "ElectricianModel":
        return cls(
            id=profile.id,
            display_name=profile.display_name,
            email=profile.email,
            phone=profile.phone,
            photo_url=profile.photo_url,
            bio=profile.bio,
            hourly_rate=profile.hourly_rate,
            rating=profile.rating,
            rating_count=profile.rating_count,
            completed_jobs=profile.completed_jobs,
            specialties=list(profile.specialties),
            languages=list(profile.languages),
            location=CoordinateModel.from_coordinate(profile.location),
            response_time=profile.response_time,
            experience=profile.experience,
            availability=profile.availability,
            is_verified=profile.is_verified,
            address=profile.address,
            service_radius_km=profile.service_radius_km,
        )


class DiscoveryEntryModel(BaseModel):
    electrician: ElectricianModel
    distance_km: Optional[float] = None

    @classmethod
    def from_domain(cls, entry: DiscoveryEntry) -> "DiscoveryEntryModel":
        return cls(electrician=ElectricianModel.from_domain(entry.profile), distance_km=entry.distance_km)


class DiscoveryResponse(BaseModel):
    items: List[DiscoveryEntryModel]
    total: int
    loading: bool = False
    fetch_error: Optional[str] = None
    location_status: str
    user_location: Optional[CoordinateModel] = None
    query: str = ""
    sort: Optional[str] = None
    selected: Optional[ElectricianModel] = None

    @classmethod
    def from_snapshot(cls, snapshot: dict[str, Any]) -> "DiscoveryResponse":
        entries = snapshot["entries"]
        selected = snapshot["selected"]
        user_location = snapshot["user_location"]
        return cls(
            items=[DiscoveryEntryModel.from_domain(entry) for entry in entries],
            total=len(entries),
            loading=snapshot["loading"],
            fetch_error=snapshot["fetch_error"],
            location_status=snapshot["location_status"],
            user_location=CoordinateModel(**user_location) if user_location else None,
            query=snapshot["query"],
            sort=snapshot["sort"],
            selected=ElectricianModel.from_domain(selected) if selected else None,
        )


class MapPageResponse(BaseModel):
    discovery: DiscoveryResponse
    map: dict
    markers_on_map: int


class ElectricianProfileUpdate(BaseModel):
    bio: Optional[str] = None
    specialties: Optional[list[str]] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    availability: Optional[bool] = None
    response_time: Optional[str] = None
    experience: Optional[int] = Field(default=None, ge=0)
    languages: Optional[list[str]] = None
    address: Optional[str] = None
    radius: Optional[float] = Field(default=None, gt=0)
    location: Optional[CoordinateModel] = None


class BioRequest(BaseModel):
    name: str = Field(..., min_length=1)
    experience: int = Field(default=0, ge=0)
    specialties: list[str] = []
    hourly_rate: float = Field(default=50.0, ge=0)
    language: Literal["en", "ar"] = "en"


class BioResponse(BaseModel):
    bio: str
