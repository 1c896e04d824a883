"""Position acquisition for the signed-in user.

A position *source* is an async callable taking the high-accuracy hint and
returning a :class:`Coordinate`. The provider runs a source once under a
timeout and always hands back a :class:`GeolocationResult`; failures become
the caller's fallback plus a readable message.

Concurrent callers each run their own request; nothing is shared or coalesced.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import httpx

from ..config import settings
from ..models.domain import Coordinate

logger = logging.getLogger(__name__)

PositionSource = Callable[[bool], Awaitable[Coordinate]]


class GeolocationError(Exception):
    """Raised by position sources when no position can be produced."""


@dataclass(frozen=True, slots=True)
class GeolocationResult:
    coordinate: Optional[Coordinate]
    error: Optional[str] = None
    from_fallback: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


class ClientPositionSource:
    """Position reported by the browser alongside the request."""

    def __init__(self, lat: float | None, lng: float | None) -> None:
        self.lat = lat
        self.lng = lng

    async def __call__(self, high_accuracy: bool) -> Coordinate:
        if self.lat is None or self.lng is None:
            raise GeolocationError("Geolocation is not supported in this browser.")
        return Coordinate(float(self.lat), float(self.lng))


class NetworkPositionSource:
    """Approximate position from an IP geolocation HTTP endpoint.

    ``url`` may contain an ``{ip}`` placeholder which is filled with the
    client address when known. The response must be JSON with
    ``latitude``/``longitude`` (or ``lat``/``lon``/``lng``) keys.
    """

    def __init__(self, url: str, client_ip: str | None = None, timeout: float = 10.0) -> None:
        self.url = url
        self.client_ip = client_ip
        self.timeout = timeout

    def _resolve_url(self) -> str:
        if "{ip}" in self.url:
            return self.url.format(ip=self.client_ip or "")
        return self.url

    async def __call__(self, high_accuracy: bool) -> Coordinate:
        # IP lookups are coarse whatever the hint says
        async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout, connect=5.0)) as client:
            response = await client.get(self._resolve_url())
            response.raise_for_status()
            payload = response.json()

        lat = payload.get("latitude", payload.get("lat"))
        lng = payload.get("longitude", payload.get("lng", payload.get("lon")))
        if lat is None or lng is None:
            raise GeolocationError("Location lookup returned no coordinates.")
        return Coordinate(float(lat), float(lng))


class GeolocationProvider:
    """Single-attempt position request with timeout and fallback."""

    def __init__(
        self,
        source: PositionSource,
        *,
        timeout: float | None = None,
        high_accuracy: bool | None = None,
    ) -> None:
        self.source = source
        self.timeout = timeout if timeout is not None else settings.geolocation_timeout_seconds
        self.high_accuracy = (
            high_accuracy if high_accuracy is not None else settings.geolocation_high_accuracy
        )

    async def locate(self, fallback: Optional[Coordinate] = None) -> GeolocationResult:
        """Return the current position, or ``fallback`` with an error message."""
        try:
            coordinate = await asyncio.wait_for(self.source(self.high_accuracy), timeout=self.timeout)
        except asyncio.TimeoutError:
            message = "Location request timed out."
        except GeolocationError as exc:
            message = str(exc)
        except Exception as exc:
            message = f"Could not get location: {exc}"
        else:
            return GeolocationResult(coordinate=coordinate)

        logger.warning(f"Geolocation failed: {message}")
        return GeolocationResult(coordinate=fallback, error=message, from_fallback=fallback is not None)


def provider_for_request(
    lat: float | None = None,
    lng: float | None = None,
    client_ip: str | None = None,
) -> GeolocationProvider:
    """Pick a position source for an incoming request.

    Browser-reported coordinates win; otherwise the configured lookup endpoint
    is used; otherwise the request is treated as coming from a client without
    geolocation support.
    """
    if lat is not None and lng is not None:
        return GeolocationProvider(ClientPositionSource(lat, lng))
    if settings.geolocation_lookup_url:
        return GeolocationProvider(NetworkPositionSource(settings.geolocation_lookup_url, client_ip))
    return GeolocationProvider(ClientPositionSource(None, None))


def default_user_location() -> Coordinate:
    return Coordinate(*settings.default_user_location)
