"""Domain models for marketplace users, electricians and bookings."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Optional

UserRole = Literal["customer", "electrician"]
BookingStatus = Literal["pending", "accepted", "rejected", "completed", "cancelled"]


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude out of range: {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"Longitude out of range: {self.lng}")

    @property
    def is_sentinel(self) -> bool:
        """True for the legacy {0,0} "no location set" marker."""
        return self.lat == 0.0 and self.lng == 0.0

    def as_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True, slots=True)
class ElectricianProfile:
    """Public electrician profile as read from the ``electricians`` table."""

    id: str
    display_name: str
    email: str = ""
    phone: str = ""
    photo_url: str = ""
    bio: str = ""
    hourly_rate: float = 50.0
    rating: float = 0.0
    rating_count: int = 0
    completed_jobs: int = 0
    specialties: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    location: Optional[Coordinate] = None
    response_time: str = "15-30 minutes"
    experience: int = 0
    availability: bool = True
    is_verified: bool = False
    address: str = ""
    service_radius_km: float = 20.0
    created_at: Optional[datetime] = field(default=None, compare=False)
    updated_at: Optional[datetime] = field(default=None, compare=False)

    @property
    def is_mappable(self) -> bool:
        return self.location is not None


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Row of the ``users`` table mirrored for the signed-in user."""

    id: str
    email: str
    display_name: str
    role: UserRole
    photo_url: str = ""
    phone: str = ""
    location: Optional[Coordinate] = None
    bio: str = ""
    specialties: tuple[str, ...] = ()
    hourly_rate: Optional[float] = None
    rating: float = 0.0
    rating_count: int = 0
    completed_jobs: int = 0
    experience: int = 0
    availability: Optional[bool] = None
    is_verified: bool = False
    created_at: Optional[datetime] = field(default=None, compare=False)
    updated_at: Optional[datetime] = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class UserSession:
    """Authenticated identity plus the profile mirrored from the store."""

    user_id: str
    email: str
    profile: UserProfile

    @property
    def role(self) -> UserRole:
        return self.profile.role

    @property
    def is_customer(self) -> bool:
        return self.role == "customer"

    @property
    def is_electrician(self) -> bool:
        return self.role == "electrician"


@dataclass(slots=True)
class Booking:
    """A job request from a customer to an electrician."""

    customer_id: str
    electrician_id: str
    service_type: str
    description: str
    address: str
    scheduled_date: datetime
    hourly_rate: float
    estimated_hours: float
    status: BookingStatus = "pending"
    id: Optional[str] = None

    @property
    def total_amount(self) -> float:
        return round(self.hourly_rate * self.estimated_hours, 2)
