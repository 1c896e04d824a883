"""Profile persistence for the ``users`` and ``electricians`` tables."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import quote

from supabase import Client

from ..data.electricians_repository import DEFAULT_HOURLY_RATE, ELECTRICIANS_TABLE
from ..data.users_repository import USERS_TABLE, get_user_data
from ..models.domain import Coordinate, UserRole

# Columns copied from a user's profile onto their public electrician row.
MIRRORED_FIELDS = (
    "display_name",
    "email",
    "phone",
    "location",
    "bio",
    "specialties",
    "hourly_rate",
    "availability",
)

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def avatar_url(display_name: str) -> str:
    return f"https://ui-avatars.com/api/?name={quote(display_name)}&background=3B82F6&color=fff"


def build_user_record(
    user_id: str,
    email: str,
    display_name: str,
    role: UserRole,
    phone: str,
    location: Optional[Coordinate],
) -> dict[str, Any]:
    is_electrician = role == "electrician"
    timestamp = _now()
    return {
        "id": user_id,
        "email": email,
        "display_name": display_name,
        "photo_url": avatar_url(display_name),
        "role": role,
        "phone": phone,
        "location": location.as_dict() if location else None,
        "bio": "",
        "specialties": [],
        "hourly_rate": DEFAULT_HOURLY_RATE if is_electrician else None,
        "rating": 0,
        "rating_count": 0,
        "completed_jobs": 0,
        "experience": 0,
        "availability": True if is_electrician else None,
        "is_verified": False,
        "created_at": timestamp,
        "updated_at": timestamp,
    }


def build_electrician_record(user_record: dict[str, Any]) -> dict[str, Any]:
    """Public directory row derived from a freshly built user record."""
    keys = (
        "id",
        "email",
        "display_name",
        "photo_url",
        "phone",
        "location",
        "bio",
        "specialties",
        "hourly_rate",
        "rating",
        "rating_count",
        "completed_jobs",
        "experience",
        "availability",
        "is_verified",
        "created_at",
        "updated_at",
    )
    return {key: user_record[key] for key in keys}


def save_new_profile(client: Client, user_record: dict[str, Any]) -> None:
    """Write the rows for a newly registered account. Raises on failure."""

    client.table(USERS_TABLE).upsert(user_record).execute()
    if user_record.get("role") == "electrician":
        client.table(ELECTRICIANS_TABLE).upsert(build_electrician_record(user_record)).execute()
    logger.info(f"Saved profile for {user_record['id']} ({user_record.get('role')})")


def update_user_profile(client: Client, user_id: str, changes: dict[str, Any]) -> None:
    """Update a ``users`` row and mirror public fields for electricians. Raises on failure."""

    update = {**changes, "updated_at": _now()}
    client.table(USERS_TABLE).update(update).eq("id", user_id).execute()

    current = get_user_data(client, user_id)
    if current is None or current.role != "electrician":
        return

    existing = {
        "display_name": current.display_name,
        "email": current.email,
        "phone": current.phone,
        "location": current.location.as_dict() if current.location else None,
        "bio": current.bio,
        "specialties": list(current.specialties),
        "hourly_rate": current.hourly_rate,
        "availability": current.availability,
    }
    mirrored = {
        key: changes[key] if changes.get(key) is not None else existing[key]
        for key in MIRRORED_FIELDS
    }
    mirrored["updated_at"] = update["updated_at"]
    client.table(ELECTRICIANS_TABLE).update(mirrored).eq("id", user_id).execute()


def update_electrician_profile(client: Client, user_id: str, changes: dict[str, Any]) -> None:
    """Update the public electrician row; the users mirror is best effort."""

    update = {**changes, "updated_at": _now()}
    client.table(ELECTRICIANS_TABLE).update(update).eq("id", user_id).execute()

    try:
        client.table(USERS_TABLE).update(update).eq("id", user_id).execute()
    except Exception as exc:
        logger.info(f"User row for {user_id} not updated, skipping: {exc}")
