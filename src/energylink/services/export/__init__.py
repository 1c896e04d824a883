"""Export format helpers."""

from .geojson import marker_to_feature, markers_to_geojson

__all__ = ["marker_to_feature", "markers_to_geojson"]
