"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Iterable, Optional

from shapely.geometry import MultiPoint

from ..models.domain import Coordinate

EARTH_RADIUS_KM = 6371.0

# (south, west, north, east)
Bounds = tuple[float, float, float, float]


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    # fixed argument order keeps the result identical in both directions
    if (lat2, lon2) < (lat1, lon1):
        lat1, lon1, lat2, lon2 = lat2, lon2, lat1, lon1
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # rounding can push a past 1 for near-antipodal points
    a = min(max(a, 0.0), 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in kilometres between two coordinates."""

    if a == b:
        return 0.0
    return haversine_km(a.lat, a.lng, b.lat, b.lng)


def display_distance(km: float) -> float:
    """Round a distance to one decimal place for display."""

    return math.floor(km * 10 + 0.5) / 10


def coordinate_bounds(points: Iterable[Coordinate]) -> Optional[Bounds]:
    """Return the (south, west, north, east) box around the points, or None if empty."""

    pairs = [(point.lng, point.lat) for point in points]
    if not pairs:
        return None
    min_x, min_y, max_x, max_y = MultiPoint(pairs).bounds
    return (min_y, min_x, max_y, max_x)


def bounds_are_valid(bounds: Optional[Bounds]) -> bool:
    """A box is usable for fitting only when it has non-zero height and width."""

    if bounds is None:
        return False
    south, west, north, east = bounds
    return north != south and east != west


def _mercator_y(lat: float) -> float:
    sin_lat = math.sin(math.radians(max(min(lat, 85.05112878), -85.05112878)))
    return 0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)


def fit_zoom(
    bounds: Bounds,
    size: tuple[int, int],
    padding: tuple[float, float] = (0.0, 0.0),
    max_zoom: int = 18,
    tile_size: int = 256,
) -> int:
    """Largest integer Web Mercator zoom at which ``bounds`` fits in ``size`` pixels."""

    south, west, north, east = bounds
    width = max(size[0] - 2 * padding[0], 1.0)
    height = max(size[1] - 2 * padding[1], 1.0)

    x_fraction = (east - west) / 360.0
    y_fraction = abs(_mercator_y(south) - _mercator_y(north))

    candidates = [max_zoom]
    if x_fraction > 0:
        candidates.append(math.floor(math.log2(width / (tile_size * x_fraction))))
    if y_fraction > 0:
        candidates.append(math.floor(math.log2(height / (tile_size * y_fraction))))
    return max(0, min(candidates))
