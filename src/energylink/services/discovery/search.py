"""Pure list derivation for the discovery view: filter, annotate, sort."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Iterable, Literal, Optional, Sequence

from ..geospatial import display_distance, distance
from ...models.domain import Coordinate, ElectricianProfile

SortKey = Literal["distance", "rating", "price", "jobs"]
SORT_KEYS: tuple[str, ...] = ("distance", "rating", "price", "jobs")


@dataclass(frozen=True, slots=True)
class DiscoveryEntry:
    """A profile with its display distance from the user, when known."""

    profile: ElectricianProfile
    distance_km: Optional[float] = None


def matches_query(profile: ElectricianProfile, needle: str) -> bool:
    """Case-insensitive substring match on name, bio or any specialty."""
    if not needle:
        return True
    return (
        needle in profile.display_name.lower()
        or needle in profile.bio.lower()
        or any(needle in specialty.lower() for specialty in profile.specialties)
    )


def filter_profiles(profiles: Iterable[ElectricianProfile], query: str) -> list[ElectricianProfile]:
    needle = query.strip().lower()
    return [profile for profile in profiles if matches_query(profile, needle)]


def annotate_distances(
    profiles: Iterable[ElectricianProfile], origin: Optional[Coordinate]
) -> list[DiscoveryEntry]:
    entries: list[DiscoveryEntry] = []
    for profile in profiles:
        km = None
        if origin is not None and profile.location is not None:
            km = display_distance(distance(origin, profile.location))
        entries.append(DiscoveryEntry(profile=profile, distance_km=km))
    return entries


def sort_entries(entries: Sequence[DiscoveryEntry], sort: Optional[str]) -> list[DiscoveryEntry]:
    """Order entries by ``sort``; None keeps the fetched order."""
    match sort:
        case None:
            return list(entries)
        case "distance":
            return sorted(
                entries,
                key=lambda e: (e.distance_km is None, e.distance_km if e.distance_km is not None else 0.0),
            )
        case "rating":
            return sorted(entries, key=lambda e: -e.profile.rating)
        case "price":
            return sorted(entries, key=lambda e: e.profile.hourly_rate)
        case "jobs":
            return sorted(entries, key=lambda e: -e.profile.completed_jobs)
        case _:
            raise ValueError(f"Unknown sort key '{sort}'.")


@functools.lru_cache(maxsize=64)
def derive_entries(
    profiles: tuple[ElectricianProfile, ...],
    query: str,
    origin: Optional[Coordinate],
    sort: Optional[str],
) -> tuple[DiscoveryEntry, ...]:
    """Memoised view list for a given directory, search text, origin and sort."""
    filtered = filter_profiles(profiles, query)
    return tuple(sort_entries(annotate_distances(filtered, origin), sort))
