"""Booking persistence."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from supabase import Client

from ..models.domain import Booking

BOOKINGS_TABLE = "bookings"

logger = logging.getLogger(__name__)


def booking_to_record(booking: Booking) -> dict[str, Any]:
    timestamp = datetime.now(timezone.utc).isoformat()
    return {
        "customer_id": booking.customer_id,
        "electrician_id": booking.electrician_id,
        "service_type": booking.service_type,
        "description": booking.description,
        "address": booking.address,
        "scheduled_date": booking.scheduled_date.isoformat(),
        "status": booking.status,
        "hourly_rate": booking.hourly_rate,
        "estimated_hours": booking.estimated_hours,
        "total_amount": booking.total_amount,
        "created_at": timestamp,
        "updated_at": timestamp,
    }


def create_booking(client: Client, booking: Booking) -> str:
    """Insert a booking request and return its id. Raises on failure."""

    try:
        response = client.table(BOOKINGS_TABLE).insert(booking_to_record(booking)).execute()
    except Exception as exc:
        logger.error(f"Error creating booking: {exc}")
        raise

    rows = response.data or []
    if not rows or rows[0].get("id") is None:
        raise RuntimeError("Booking was not created: the store returned no id.")
    booking.id = str(rows[0]["id"])
    logger.info(f"Created booking {booking.id} for electrician {booking.electrician_id}")
    return booking.id
