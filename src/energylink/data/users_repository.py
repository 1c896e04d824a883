"""Data access helpers for ``users`` rows."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from supabase import Client

from .records import (
    coerce_bool,
    coerce_float,
    coerce_int,
    coerce_str,
    coerce_str_tuple,
    first_present,
    parse_location,
    parse_timestamp,
)
from ..models.domain import UserProfile

USERS_TABLE = "users"

logger = logging.getLogger(__name__)


def normalize_user(record: Mapping[str, Any]) -> UserProfile:
    """Map an untyped ``users`` row onto :class:`UserProfile`."""

    record_id = coerce_str(first_present(record, "id", "uid"))
    if not record_id:
        raise ValueError("User record has no id")

    role = coerce_str(record.get("role"), "customer")
    if role not in ("customer", "electrician"):
        logger.warning(f"User {record_id}: unknown role '{role}', treating as customer")
        role = "customer"

    availability = record.get("availability")
    return UserProfile(
        id=record_id,
        email=coerce_str(record.get("email")),
        display_name=coerce_str(first_present(record, "display_name", "displayName")),
        role=role,
        photo_url=coerce_str(first_present(record, "photo_url", "photoURL")),
        phone=coerce_str(record.get("phone")),
        location=parse_location(record),
        bio=coerce_str(record.get("bio")),
        specialties=coerce_str_tuple(record.get("specialties")),
        hourly_rate=coerce_float(first_present(record, "hourly_rate", "hourlyRate")),
        rating=coerce_float(record.get("rating"), 0.0) or 0.0,
        rating_count=coerce_int(first_present(record, "rating_count", "ratingCount")),
        completed_jobs=coerce_int(first_present(record, "completed_jobs", "completedJobs")),
        experience=coerce_int(record.get("experience")),
        availability=None if availability is None else coerce_bool(availability, True),
        is_verified=coerce_bool(first_present(record, "is_verified", "isVerified"), False),
        created_at=parse_timestamp(first_present(record, "created_at", "createdAt")),
        updated_at=parse_timestamp(first_present(record, "updated_at", "updatedAt")),
    )


def get_user_data(client: Client, user_id: str) -> Optional[UserProfile]:
    """Load the ``users`` row for ``user_id``; None when missing or on error."""

    try:
        response = client.table(USERS_TABLE).select("*").eq("id", user_id).limit(1).execute()
    except Exception as exc:
        logger.error(f"Error getting user data for {user_id}: {exc}")
        return None

    rows = response.data or []
    if not rows:
        return None
    try:
        return normalize_user(rows[0])
    except ValueError as exc:
        logger.warning(f"User {user_id} is malformed: {exc}")
        return None
