"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..deps import get_sessions
from ...data.electricians_repository import ELECTRICIANS_TABLE
from ...services.auth.session import SessionRegistry

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database(sessions: SessionRegistry = Depends(get_sessions)) -> dict:
    """Check that the hosted store answers a directory query."""
    client = sessions.client
    if client is None:
        return {
            "configured": False,
            "message": "Supabase not configured. Set ENERGYLINK_SUPABASE_URL and ENERGYLINK_SUPABASE_KEY environment variables.",
        }

    try:
        response = client.table(ELECTRICIANS_TABLE).select("id", count="exact").limit(1).execute()
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }

    count = getattr(response, "count", None)
    return {
        "configured": True,
        "connected": True,
        "electricians_count": count,
        "message": "Database connected.",
    }
