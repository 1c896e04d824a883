"""Coercion helpers for loosely-typed rows coming back from the store."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from ..models.domain import Coordinate


def first_present(record: Mapping[str, Any], *keys: str) -> Any:
    """Return the first value among ``keys`` that is present and not None."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def coerce_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def coerce_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        number = float(str(value).replace(",", "")) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        logging.warning(f"Unable to parse number from value '{value}', using {default}")
        return default
    if not math.isfinite(number):
        logging.warning(f"Ignoring non-finite number '{value}', using {default}")
        return default
    return number


def coerce_int(value: Any, default: int = 0) -> int:
    number = coerce_float(value, None)
    if number is None:
        return default
    return int(number)


def coerce_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "y"}
    return bool(value)


def coerce_str_tuple(value: Any, default: Iterable[str] = ()) -> tuple[str, ...]:
    """Accept a list of strings or a comma-separated string."""
    if value is None:
        return tuple(default)
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = value
    else:
        return tuple(default)
    return tuple(text for text in (coerce_str(item) for item in items) if text)


def parse_location(record: Mapping[str, Any]) -> Optional[Coordinate]:
    """Read a location from a row, returning None when it is unusable.

    Supports a nested ``location`` object (``lat``/``lng`` or ``latitude``/``longitude``)
    as well as flat ``latitude``/``longitude`` columns. The {0,0} sentinel
    written by older clients means "no location" and maps to None.
    """
    raw = record.get("location")
    if isinstance(raw, Mapping):
        lat = first_present(raw, "lat", "latitude")
        lng = first_present(raw, "lng", "lon", "longitude")
    else:
        lat = first_present(record, "latitude", "lat")
        lng = first_present(record, "longitude", "lng", "lon")

    lat_value = coerce_float(lat)
    lng_value = coerce_float(lng)
    if lat_value is None or lng_value is None:
        return None
    try:
        coordinate = Coordinate(lat_value, lng_value)
    except ValueError as exc:
        logging.warning(f"Ignoring invalid location: {exc}")
        return None
    if coordinate.is_sentinel:
        return None
    return coordinate


def parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
