"""GeoJSON export utilities for map markers."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from ..map.view import Marker

MARKER_COLORS = {
    "electrician": "#059669",
    "user": "#3b82f6",
}


def marker_to_feature(marker: Marker) -> Dict[str, Any]:
    """Convert a marker to a GeoJSON Point feature.

    GeoJSON positions are [lon, lat].
    """
    return {
        "type": "Feature",
        "id": marker.id,
        "geometry": {
            "type": "Point",
            "coordinates": [marker.position.lng, marker.position.lat],
        },
        "properties": {
            "kind": marker.kind,
            "electrician_id": marker.electrician_id,
            "title": marker.title,
            "color": MARKER_COLORS.get(marker.kind, "#6b7280"),
            **marker.popup,
        },
    }


def markers_to_geojson(markers: Iterable[Marker]) -> Dict[str, Any]:
    features: List[Dict[str, Any]] = [marker_to_feature(marker) for marker in markers]
    return {"type": "FeatureCollection", "features": features}
