"""Map view and marker helpers."""

from .view import MapHandle, MapView, Marker, Viewport, electrician_marker

__all__ = ["MapHandle", "MapView", "Marker", "Viewport", "electrician_marker"]
