"""Electrician discovery: search derivation and the discovery view."""

from .search import DiscoveryEntry, derive_entries, filter_profiles, sort_entries
from .view import DiscoveryState, DiscoveryView

__all__ = [
    "DiscoveryEntry",
    "DiscoveryState",
    "DiscoveryView",
    "derive_entries",
    "filter_profiles",
    "sort_entries",
]
