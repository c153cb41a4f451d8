"""FIRMS active-fire endpoints — CSV parsing, fire layers, live fetch.

CSV endpoints take the raw CSV as the request body (text/csv or
text/plain). Layers live in an in-process LayerManager; the map client pulls
them as GeoJSON and renders one marker per feature.
"""

from __future__ import annotations

from typing import Optional

import httpx
from fastapi import APIRouter, HTTPException, Query, Request
from loguru import logger
from pydantic import BaseModel

from app.config import settings
from engine.firms.client import (
    BoundingBox,
    FirmsClient,
    FirmsConfigError,
    FirmsResponseError,
)
from engine.firms.parser import parse_firms_csv
from engine.layers import Layer, LayerManager

router = APIRouter(prefix="/api/firms", tags=["firms"])

layer_manager = LayerManager()


# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------

class FireRecordOut(BaseModel):
    """One parsed fire detection; absent columns are null."""
    latitude: float
    longitude: float
    acq_date: Optional[str] = None
    acq_time: Optional[str] = None
    confidence: Optional[str] = None
    daynight: Optional[str] = None
    bright_t31: Optional[str] = None
    brightness: Optional[str] = None
    frp: Optional[str] = None
    satellite: Optional[str] = None
    version: Optional[str] = None


class ParseResponse(BaseModel):
    count: int
    records: list[FireRecordOut]


class LayerSummary(BaseModel):
    """Layer listing entry (features omitted)."""
    layer_id: str
    name: str
    source: str
    visible: bool
    feature_count: int
    created_at: str
    updated_at: str


class VisibilityRequest(BaseModel):
    visible: bool


class MapConfig(BaseModel):
    center_lat: float
    center_lng: float
    source: str
    day_range: int
    live_fetch: bool


def _summary(layer: Layer) -> LayerSummary:
    return LayerSummary(
        layer_id=layer.layer_id,
        name=layer.name,
        source=layer.source,
        visible=layer.visible,
        feature_count=len(layer.features),
        created_at=layer.created_at,
        updated_at=layer.updated_at,
    )


async def _read_csv_body(request: Request) -> str:
    body = await request.body()
    try:
        return body.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV body must be UTF-8")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

@router.post("/parse", response_model=ParseResponse)
async def parse_csv(request: Request):
    """Parse a FIRMS CSV body into records without registering a layer."""
    records = parse_firms_csv(await _read_csv_body(request))
    return ParseResponse(
        count=len(records),
        records=[FireRecordOut(**r.to_dict()) for r in records],
    )


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------

@router.post("/layers", response_model=LayerSummary, status_code=201)
async def import_layer(
    request: Request,
    name: str = Query("FIRMS Active Fires"),
    source: str = Query("csv"),
):
    """Import a FIRMS CSV body as a new fire layer."""
    layer = layer_manager.import_firms_csv(
        await _read_csv_body(request), name=name, source=source,
    )
    return _summary(layer)


@router.get("/layers", response_model=list[LayerSummary])
async def list_layers():
    return [_summary(layer) for layer in layer_manager.list_layers()]


@router.get("/layers/{layer_id}/geojson")
async def layer_geojson(layer_id: str):
    """Export a fire layer as a GeoJSON FeatureCollection."""
    try:
        return layer_manager.export_layer(layer_id, "geojson")
    except KeyError:
        raise HTTPException(status_code=404, detail="Layer not found")


@router.put("/layers/{layer_id}/visibility", response_model=LayerSummary)
async def set_layer_visibility(layer_id: str, body: VisibilityRequest):
    try:
        layer_manager.set_visibility(layer_id, body.visible)
    except KeyError:
        raise HTTPException(status_code=404, detail="Layer not found")
    return _summary(layer_manager.get_layer(layer_id))


@router.delete("/layers/{layer_id}")
async def delete_layer(layer_id: str):
    if not layer_manager.remove_layer(layer_id):
        raise HTTPException(status_code=404, detail="Layer not found")
    return {"deleted": layer_id}


# ---------------------------------------------------------------------------
# Live fetch from NASA FIRMS
# ---------------------------------------------------------------------------

@router.get("/fetch")
async def fetch_fires(
    bbox: str = Query(..., description="west,south,east,north"),
    days: Optional[int] = Query(None, ge=1, le=10),
    source: Optional[str] = Query(None),
):
    """Fetch active fires for an area, register them as a layer, return GeoJSON."""
    try:
        area = BoundingBox.parse(bbox)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    client = FirmsClient.from_settings(settings)
    source = source or client.source
    try:
        csv_text = await client.fetch_csv(area, days=days, source=source)
    except FirmsConfigError:
        raise HTTPException(status_code=503, detail="FIRMS MAP_KEY not configured")
    except FirmsResponseError as e:
        logger.warning(f"FIRMS rejected request: {e}")
        raise HTTPException(status_code=502, detail=f"FIRMS error: {e}")
    except httpx.HTTPError:
        raise HTTPException(status_code=502, detail="FIRMS service unavailable")

    layer = layer_manager.import_firms_csv(
        csv_text, name=f"{source} {area}", source=source,
    )
    return layer_manager.export_layer(layer.layer_id, "geojson")


@router.get("/config", response_model=MapConfig)
async def map_config():
    """Initial map view and fetch defaults for the frontend."""
    return MapConfig(
        center_lat=settings.map_center_lat,
        center_lng=settings.map_center_lng,
        source=settings.firms_source,
        day_range=settings.firms_day_range,
        live_fetch=bool(settings.firms_map_key),
    )
