"""Booking request/response models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class BookingRequest(BaseModel):
    electrician_id: str = Field(..., min_length=1)
    service_type: str = Field(..., min_length=1)
    description: str = ""
    address: str = Field(..., min_length=1)
    scheduled_date: datetime
    estimated_hours: float = Field(..., gt=0)
    hourly_rate: Optional[float] = Field(
        default=None, ge=0, description="Defaults to the electrician's current rate."
    )


class BookingResponse(BaseModel):
    id: str
    status: str
    hourly_rate: float
    estimated_hours: float
    total_amount: float
