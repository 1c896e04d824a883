"""Discovery view: directory, user position and search text merged into one list.

The directory fetch and the position request run as independent tasks and
each writes only its own slice of :class:`DiscoveryState`. Whichever finishes
first is shown first. Results arriving after :meth:`DiscoveryView.unmount`
(or after a remount) are discarded; the underlying requests are not cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from .search import SORT_KEYS, DiscoveryEntry, derive_entries
from ..geolocation import GeolocationResult
from ...data.electricians_repository import DirectoryResult
from ...models.domain import Coordinate, ElectricianProfile

DirectoryLoader = Callable[[], Awaitable[DirectoryResult]]
Locator = Callable[[], Awaitable[GeolocationResult]]

logger = logging.getLogger(__name__)


@dataclass
class DiscoveryState:
    profiles: tuple[ElectricianProfile, ...] = ()
    loading_directory: bool = True
    loading_location: bool = True
    fetch_error: Optional[str] = None
    user_location: Optional[Coordinate] = None
    location_error: Optional[str] = None
    query: str = ""
    sort: Optional[str] = None
    selected_id: Optional[str] = None


class DiscoveryView:
    def __init__(
        self,
        load_directory: DirectoryLoader,
        locate: Locator,
        *,
        query: str = "",
        sort: Optional[str] = None,
    ) -> None:
        self._load_directory = load_directory
        self._locate = locate
        self._mounted = False
        self._generation = 0
        self.state = DiscoveryState()
        self.set_query(query)
        self.set_sort(sort)

    @property
    def mounted(self) -> bool:
        return self._mounted

    async def mount(self) -> None:
        """Start both loads and wait until each has resolved (or been discarded)."""
        if self._mounted:
            raise RuntimeError("Discovery view is already mounted.")
        self._mounted = True
        self._generation += 1
        generation = self._generation
        self.state.loading_directory = True
        self.state.loading_location = True
        await asyncio.gather(
            self._resolve_directory(generation),
            self._resolve_location(generation),
        )

    def unmount(self) -> None:
        self._mounted = False

    def _is_current(self, generation: int) -> bool:
        return self._mounted and generation == self._generation

    async def _resolve_directory(self, generation: int) -> None:
        try:
            result = await self._load_directory()
        except Exception as exc:
            logger.error(f"Failed to load electricians: {exc}")
            result = DirectoryResult(profiles=(), error=str(exc) or "Failed to load electricians.")

        if not self._is_current(generation):
            logger.debug("Discovery view no longer mounted, discarding directory result")
            return

        self.state.profiles = result.profiles
        self.state.fetch_error = result.error
        self.state.loading_directory = False
        if self.state.selected_id and self.selected is None:
            self.state.selected_id = None

    async def _resolve_location(self, generation: int) -> None:
        try:
            result = await self._locate()
        except Exception as exc:
            logger.warning(f"Location lookup failed: {exc}")
            result = GeolocationResult(coordinate=None, error=str(exc) or "Could not get location")

        if not self._is_current(generation):
            logger.debug("Discovery view no longer mounted, discarding location result")
            return

        self.state.user_location = result.coordinate
        self.state.location_error = result.error
        self.state.loading_location = False

    def set_query(self, text: str) -> None:
        self.state.query = text or ""

    def set_sort(self, sort: Optional[str]) -> None:
        if sort is not None and sort not in SORT_KEYS:
            raise ValueError(f"Unknown sort key '{sort}'.")
        self.state.sort = sort

    @property
    def entries(self) -> tuple[DiscoveryEntry, ...]:
        return derive_entries(
            self.state.profiles, self.state.query, self.state.user_location, self.state.sort
        )

    @property
    def mappable_profiles(self) -> list[ElectricianProfile]:
        return [entry.profile for entry in self.entries if entry.profile.location is not None]

    def select(self, profile_id: str) -> Optional[ElectricianProfile]:
        profile = next((p for p in self.state.profiles if p.id == profile_id), None)
        if profile is None:
            logger.warning(f"Ignoring selection of unknown electrician {profile_id}")
            return None
        self.state.selected_id = profile_id
        return profile

    def close_detail(self) -> None:
        self.state.selected_id = None

    @property
    def selected(self) -> Optional[ElectricianProfile]:
        if not self.state.selected_id:
            return None
        return next((p for p in self.state.profiles if p.id == self.state.selected_id), None)

    def location_status(self) -> str:
        if self.state.loading_location:
            return "Getting your location..."
        if self.state.user_location is not None and self.state.location_error is None:
            return "Location enabled"
        return self.state.location_error or "Location not available"

    def snapshot(self) -> dict[str, Any]:
        """Plain view model of the current state."""
        state = self.state
        return {
            "loading": state.loading_directory,
            "loading_location": state.loading_location,
            "fetch_error": state.fetch_error,
            "location_status": self.location_status(),
            "user_location": state.user_location.as_dict() if state.user_location else None,
            "query": state.query,
            "sort": state.sort,
            "entries": list(self.entries),
            "selected": self.selected,
        }
