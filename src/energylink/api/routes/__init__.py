"""Route group exports."""

from . import auth, bookings, electricians, health, pages, profile

__all__ = ["health", "auth", "profile", "electricians", "bookings", "pages"]
