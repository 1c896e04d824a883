"""Data access helpers for the electrician directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from fastapi.concurrency import run_in_threadpool
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
from ..db.supabase import get_supabase_client
from ..models.domain import ElectricianProfile

ELECTRICIANS_TABLE = "electricians"

DEFAULT_HOURLY_RATE = 50.0
DEFAULT_RATING = 0.0
DEFAULT_COMPLETED_JOBS = 0
DEFAULT_RESPONSE_TIME = "15-30 minutes"
DEFAULT_LANGUAGES = ("English", "Arabic")
DEFAULT_SERVICE_RADIUS_KM = 20.0
MAX_RATING = 5.0

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DirectoryResult:
    """Outcome of a directory fetch: the profiles plus an error message on failure."""

    profiles: tuple[ElectricianProfile, ...]
    error: Optional[str] = None


def normalize_electrician(record: Mapping[str, Any]) -> ElectricianProfile:
    """Map an untyped ``electricians`` row onto :class:`ElectricianProfile`.

    Missing numbers fall back to the directory defaults, missing collections to
    empty, and unusable locations to None. Only a missing id is fatal.
    """
    record_id = coerce_str(first_present(record, "id", "uid"))
    if not record_id:
        raise ValueError("Electrician record has no id")

    hourly_rate = coerce_float(first_present(record, "hourly_rate", "hourlyRate"), DEFAULT_HOURLY_RATE)
    if hourly_rate is None or hourly_rate < 0:
        logger.warning(f"Electrician {record_id}: invalid hourly rate {hourly_rate}, using default")
        hourly_rate = DEFAULT_HOURLY_RATE

    rating = coerce_float(record.get("rating"), DEFAULT_RATING) or DEFAULT_RATING
    rating = min(max(rating, 0.0), MAX_RATING)

    return ElectricianProfile(
        id=record_id,
        display_name=coerce_str(first_present(record, "display_name", "displayName", "name")),
        email=coerce_str(record.get("email")),
        phone=coerce_str(record.get("phone")),
        photo_url=coerce_str(first_present(record, "photo_url", "photoURL", "avatar")),
        bio=coerce_str(record.get("bio")),
        hourly_rate=hourly_rate,
        rating=rating,
        rating_count=max(coerce_int(first_present(record, "rating_count", "ratingCount")), 0),
        completed_jobs=max(
            coerce_int(first_present(record, "completed_jobs", "completedJobs"), DEFAULT_COMPLETED_JOBS), 0
        ),
        specialties=coerce_str_tuple(record.get("specialties")),
        languages=coerce_str_tuple(record.get("languages"), DEFAULT_LANGUAGES),
        location=parse_location(record),
        response_time=coerce_str(first_present(record, "response_time", "responseTime"), DEFAULT_RESPONSE_TIME),
        experience=max(coerce_int(record.get("experience")), 0),
        availability=coerce_bool(record.get("availability"), True),
        is_verified=coerce_bool(first_present(record, "is_verified", "isVerified"), False),
        address=coerce_str(record.get("address")),
        service_radius_km=coerce_float(first_present(record, "radius", "service_radius_km"), DEFAULT_SERVICE_RADIUS_KM)
        or DEFAULT_SERVICE_RADIUS_KM,
        created_at=parse_timestamp(first_present(record, "created_at", "createdAt")),
        updated_at=parse_timestamp(first_present(record, "updated_at", "updatedAt")),
    )


def _require_client(client: Client | None) -> Client:
    client = client if client is not None else get_supabase_client()
    if client is None:
        raise RuntimeError("Supabase is not configured.")
    return client


def load_electricians(client: Client | None = None) -> list[ElectricianProfile]:
    """Read and normalise every row of the directory. Raises on transport errors."""

    client = _require_client(client)
    response = client.table(ELECTRICIANS_TABLE).select("*").execute()

    profiles: list[ElectricianProfile] = []
    for row in response.data or []:
        try:
            profiles.append(normalize_electrician(row))
        except ValueError as exc:
            logger.warning(f"Skipping electrician record: {exc}")
    return profiles


async def fetch_directory(client: Client | None = None) -> DirectoryResult:
    """Fetch the directory without raising; failures carry an error message."""

    logger.info("Fetching electricians...")
    try:
        profiles = await run_in_threadpool(load_electricians, client)
    except Exception as exc:
        logger.error(f"Error getting electricians: {exc}")
        return DirectoryResult(profiles=(), error=str(exc) or "Failed to load electricians.")

    logger.info(f"Successfully fetched {len(profiles)} electricians")
    return DirectoryResult(profiles=tuple(profiles))


async def fetch_all(client: Client | None = None) -> list[ElectricianProfile]:
    """Every electrician profile, or an empty list when the store is unreachable."""

    result = await fetch_directory(client)
    return list(result.profiles)


def get_electrician(electrician_id: str, client: Client | None = None) -> Optional[ElectricianProfile]:
    """Fetch one profile by id, None when missing or on error."""

    try:
        client = _require_client(client)
        response = (
            client.table(ELECTRICIANS_TABLE).select("*").eq("id", electrician_id).limit(1).execute()
        )
    except Exception as exc:
        logger.error(f"Error getting electrician by ID {electrician_id}: {exc}")
        return None

    rows = response.data or []
    if not rows:
        return None
    try:
        return normalize_electrician(rows[0])
    except ValueError as exc:
        logger.warning(f"Electrician {electrician_id} is malformed: {exc}")
        return None
