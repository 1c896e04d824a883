"""Map view: electrician and user markers on a tile map.

A :class:`MapHandle` stands in for the map instance and its tile layer. The
view creates exactly one per mount and must release it on unmount; a
released handle refuses further use. Markers are rebuilt from scratch on
every update.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Optional, Sequence

from ..geospatial import Bounds, bounds_are_valid, coordinate_bounds, fit_zoom
from ...config import settings
from ...models.domain import Coordinate, ElectricianProfile

USER_MARKER_ID = "user"
ELECTRICIAN_MARKER_PREFIX = "electrician:"

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Marker:
    id: str
    kind: Literal["electrician", "user"]
    position: Coordinate
    title: str
    popup: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def electrician_id(self) -> Optional[str]:
        if self.kind != "electrician":
            return None
        return self.id[len(ELECTRICIAN_MARKER_PREFIX):]


@dataclass(frozen=True, slots=True)
class Viewport:
    mode: Literal["default", "fit_bounds", "center"]
    center: Optional[Coordinate] = None
    zoom: Optional[int] = None
    bounds: Optional[Bounds] = None
    padding: tuple[float, float] = (0.0, 0.0)
    max_zoom: Optional[int] = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode,
            "center": self.center.as_dict() if self.center else None,
            "zoom": self.zoom,
            "bounds": list(self.bounds) if self.bounds else None,
            "padding": list(self.padding),
            "max_zoom": self.max_zoom,
        }


class MapHandle:
    """Map instance with one tile layer and a marker registry."""

    def __init__(self, tile_url: str, attribution: str, center: Coordinate, zoom: int) -> None:
        self.tile_url = tile_url
        self.attribution = attribution
        self.viewport = Viewport(mode="default", center=center, zoom=zoom)
        self._markers: dict[str, Marker] = {}
        self.released = False

    def _ensure_open(self) -> None:
        if self.released:
            raise RuntimeError("Map handle has been released.")

    def add_marker(self, marker: Marker) -> None:
        self._ensure_open()
        self._markers[marker.id] = marker

    def remove_marker(self, marker_id: str) -> None:
        self._ensure_open()
        self._markers.pop(marker_id, None)

    @property
    def markers(self) -> list[Marker]:
        return list(self._markers.values())

    def set_viewport(self, viewport: Viewport) -> None:
        self._ensure_open()
        self.viewport = viewport

    def release(self) -> None:
        self._markers.clear()
        self.released = True


def electrician_marker(profile: ElectricianProfile) -> Optional[Marker]:
    if profile.location is None:
        return None
    return Marker(
        id=f"{ELECTRICIAN_MARKER_PREFIX}{profile.id}",
        kind="electrician",
        position=profile.location,
        title=profile.display_name or "Electrician",
        popup={
            "name": profile.display_name or "Electrician",
            "hourly_rate": profile.hourly_rate,
            "bio": profile.bio or "No bio available",
        },
    )


class MapView:
    def __init__(
        self,
        on_select: Callable[[str], Any],
        *,
        padding: tuple[float, float] | None = None,
        max_zoom: int | None = None,
        default_center: Coordinate | None = None,
        default_zoom: int | None = None,
    ) -> None:
        self.on_select = on_select
        self.padding = padding or settings.map_fit_padding
        self.max_zoom = max_zoom if max_zoom is not None else settings.map_max_zoom
        self.default_center = default_center or Coordinate(*settings.map_default_center)
        self.default_zoom = default_zoom if default_zoom is not None else settings.map_default_zoom
        self._handle: Optional[MapHandle] = None

    def mount(self) -> MapHandle:
        if self._handle is not None:
            raise RuntimeError("Map view is already mounted.")
        self._handle = MapHandle(
            tile_url=settings.map_tile_url,
            attribution=settings.map_tile_attribution,
            center=self.default_center,
            zoom=self.default_zoom,
        )
        return self._handle

    def unmount(self) -> None:
        if self._handle is None:
            return
        self._handle.release()
        self._handle = None

    def __enter__(self) -> "MapView":
        self.mount()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.unmount()

    @property
    def handle(self) -> MapHandle:
        if self._handle is None:
            raise RuntimeError("Map view is not mounted.")
        return self._handle

    @property
    def markers(self) -> list[Marker]:
        return self.handle.markers

    @property
    def viewport(self) -> Viewport:
        return self.handle.viewport

    def update(
        self,
        electricians: Sequence[ElectricianProfile],
        user_location: Optional[Coordinate],
    ) -> None:
        """Replace all markers and recompute the viewport."""
        handle = self.handle

        for marker in handle.markers:
            handle.remove_marker(marker.id)

        for profile in electricians:
            marker = electrician_marker(profile)
            if marker is not None:
                handle.add_marker(marker)

        if user_location is not None:
            handle.add_marker(
                Marker(id=USER_MARKER_ID, kind="user", position=user_location, title="Your Location")
            )

        bounds = coordinate_bounds(marker.position for marker in handle.markers)
        if bounds_are_valid(bounds):
            handle.set_viewport(
                Viewport(mode="fit_bounds", bounds=bounds, padding=self.padding, max_zoom=self.max_zoom)
            )
        elif user_location is not None:
            handle.set_viewport(Viewport(mode="center", center=user_location, zoom=self.default_zoom))
        logger.debug(f"Map rebuilt with {len(handle.markers)} markers ({handle.viewport.mode})")

    def click(self, marker_id: str) -> None:
        """Marker click; electrician markers select the electrician."""
        marker = next((m for m in self.handle.markers if m.id == marker_id), None)
        if marker is None or marker.electrician_id is None:
            return
        self.on_select(marker.electrician_id)

    def fit_zoom_for(self, size: tuple[int, int]) -> int:
        """Zoom level the current viewport resolves to for a map of ``size`` pixels."""
        viewport = self.viewport
        if viewport.mode == "fit_bounds" and viewport.bounds is not None:
            return fit_zoom(viewport.bounds, size, viewport.padding, viewport.max_zoom or self.max_zoom)
        return viewport.zoom if viewport.zoom is not None else self.default_zoom

    def to_overlay(self) -> dict[str, Any]:
        handle = self.handle
        return {
            "tile_layer": {"url": handle.tile_url, "attribution": handle.attribution},
            "markers": [
                {
                    "id": marker.id,
                    "kind": marker.kind,
                    "electrician_id": marker.electrician_id,
                    "lat": marker.position.lat,
                    "lng": marker.position.lng,
                    "title": marker.title,
                    "popup": marker.popup,
                }
                for marker in handle.markers
            ],
            "viewport": handle.viewport.as_dict(),
        }
