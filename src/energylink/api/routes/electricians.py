"""Electrician directory endpoints."""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from supabase import Client

from ..deps import client_ip, get_client
from ...data.electricians_repository import get_electrician
from ...schemas.electricians import DiscoveryResponse, ElectricianModel
from ...services.discovery.pages import discover, render_map
from ...services.export import markers_to_geojson

router = APIRouter(prefix="/electricians", tags=["electricians"])

SortParam = Optional[Literal["distance", "rating", "price", "jobs"]]


@router.get("", response_model=DiscoveryResponse, status_code=status.HTTP_200_OK)
async def list_electricians(
    request: Request,
    q: str = Query(default="", description="Search over name, bio and specialties"),
    sort: SortParam = Query(default=None, description="Optional ordering"),
    lat: float | None = Query(default=None, ge=-90, le=90, description="Browser-reported latitude"),
    lng: float | None = Query(default=None, ge=-180, le=180, description="Browser-reported longitude"),
    selected: str | None = Query(default=None, description="Electrician to show in the detail panel"),
    client: Client = Depends(get_client),
) -> DiscoveryResponse:
    view = await discover(
        client, lat=lat, lng=lng, client_ip=client_ip(request), query=q, sort=sort, selected=selected
    )
    return DiscoveryResponse.from_snapshot(view.snapshot())


@router.get("/geojson", status_code=status.HTTP_200_OK)
async def electricians_geojson(
    request: Request,
    q: str = Query(default=""),
    lat: float | None = Query(default=None, ge=-90, le=90),
    lng: float | None = Query(default=None, ge=-180, le=180),
    client: Client = Depends(get_client),
) -> dict:
    page = await render_map(client, lat=lat, lng=lng, client_ip=client_ip(request), query=q)
    return markers_to_geojson(page.markers)


@router.get("/{electrician_id}", response_model=ElectricianModel, status_code=status.HTTP_200_OK)
def get_electrician_by_id(electrician_id: str, client: Client = Depends(get_client)) -> ElectricianModel:
    profile = get_electrician(electrician_id, client)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Electrician not found.")
    return ElectricianModel.from_domain(profile)
