"""Request-scoped composition of the discovery and map views."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from supabase import Client

from .view import DiscoveryView
from ..geolocation import default_user_location, provider_for_request
from ..map.view import MapView, Marker
from ...data.electricians_repository import fetch_directory
from ...models.domain import Coordinate


@dataclass(slots=True)
class MapPage:
    discovery: DiscoveryView
    overlay: dict[str, Any]
    markers: list[Marker]

    @property
    def marker_count(self) -> int:
        return len(self.markers)


async def discover(
    client: Client,
    *,
    lat: float | None = None,
    lng: float | None = None,
    client_ip: str | None = None,
    query: str = "",
    sort: str | None = None,
    selected: str | None = None,
    fallback: Optional[Coordinate] = None,
) -> DiscoveryView:
    """Resolve a discovery view for one request.

    The view is unmounted before returning; its state stays readable.
    """

    provider = provider_for_request(lat, lng, client_ip)
    view = DiscoveryView(
        lambda: fetch_directory(client),
        lambda: provider.locate(fallback),
        query=query,
        sort=sort,
    )
    try:
        await view.mount()
    finally:
        view.unmount()
    if selected:
        view.select(selected)
    return view


async def render_map(
    client: Client,
    *,
    lat: float | None = None,
    lng: float | None = None,
    client_ip: str | None = None,
    query: str = "",
    selected: str | None = None,
    marker: str | None = None,
) -> MapPage:
    """Discovery plus map for the ``/map`` page.

    The map page falls back to the default user location when the position
    is unavailable. ``marker`` simulates a marker click, which goes through
    the same selection path as picking from the list.
    """
    view = await discover(
        client,
        lat=lat,
        lng=lng,
        client_ip=client_ip,
        query=query,
        selected=selected,
        fallback=default_user_location(),
    )
    with MapView(on_select=view.select) as map_view:
        map_view.update(view.mappable_profiles, view.state.user_location)
        if marker:
            map_view.click(marker)
        overlay = map_view.to_overlay()
        markers = map_view.markers
    return MapPage(discovery=view, overlay=overlay, markers=markers)
