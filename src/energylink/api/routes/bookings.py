"""Booking request endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client

from ..deps import get_client, require_session
from ...data.electricians_repository import get_electrician
from ...models.domain import Booking, UserSession
from ...persistence.bookings import create_booking
from ...schemas.bookings import BookingRequest, BookingResponse

router = APIRouter(prefix="/bookings", tags=["bookings"])

logger = logging.getLogger(__name__)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def request_booking(
    payload: BookingRequest,
    session: UserSession = Depends(require_session),
    client: Client = Depends(get_client),
) -> BookingResponse:
    if not session.is_customer:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only customers can request bookings.")

    electrician = get_electrician(payload.electrician_id, client)
    if electrician is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Electrician not found.")

    hourly_rate = payload.hourly_rate if payload.hourly_rate is not None else electrician.hourly_rate
    booking = Booking(
        customer_id=session.user_id,
        electrician_id=electrician.id,
        service_type=payload.service_type,
        description=payload.description,
        address=payload.address,
        scheduled_date=payload.scheduled_date,
        hourly_rate=hourly_rate,
        estimated_hours=payload.estimated_hours,
    )

    try:
        booking_id = create_booking(client, booking)
    except Exception as exc:
        logger.error(f"Booking request failed for customer {session.user_id}: {exc}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    return BookingResponse(
        id=booking_id,
        status=booking.status,
        hourly_rate=booking.hourly_rate,
        estimated_hours=booking.estimated_hours,
        total_amount=booking.total_amount,
    )
