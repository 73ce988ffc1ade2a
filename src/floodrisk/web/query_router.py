"""Query API router: zones, shelters, parcels and premium estimates."""

from __future__ import annotations

import math
from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request

from floodrisk.core.types import ParcelMetric, ZoneId
from floodrisk.session import HazardSession


router = APIRouter()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_session(request: Request) -> HazardSession:
    session = getattr(request.app.state, "hazard_session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Hazard session not available")
    return session


def _point(lon: float, lat: float) -> tuple[float, float]:
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise HTTPException(status_code=422, detail="lon and lat must be finite numbers")
    return (lon, lat)


def _parcel_summary(parcel) -> dict[str, Any]:
    return parcel.model_dump(mode="json", exclude={"feature"}) | {
        "properties": dict(parcel.feature.properties)
    }


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.get("/api/health")
async def api_health(request: Request) -> dict[str, Any]:
    """Service health and per-layer load status."""
    session = _get_session(request)
    layers = [status.model_dump() for status in session.layer_status()]
    return {
        "status": "ok",
        "service": "floodrisk",
        "layers": layers,
    }


@router.get("/api/zones/classify")
async def api_classify(
    request: Request,
    lon: float = Query(...),
    lat: float = Query(...),
) -> dict[str, Any]:
    """Highest-priority flood zone containing the point."""
    session = _get_session(request)
    match = session.classify(_point(lon, lat))
    if match is None:
        raise HTTPException(status_code=404, detail="No mapped flood zone at this point")
    return {
        "zone_id": str(match.zone_id),
        "risk_position": session.risk_position(match.zone_id),
        "elevation": match.elevation.model_dump(),
        "properties": dict(match.feature.properties),
    }


@router.get("/api/facilities/nearest")
async def api_nearest_facility(
    request: Request,
    lon: float = Query(...),
    lat: float = Query(...),
    parcel_name: str | None = None,
) -> dict[str, Any]:
    """Nearest shelter, using the named (or located) parcel as context."""
    session = _get_session(request)
    point = _point(lon, lat)
    if parcel_name:
        parcel = session.find_parcel(parcel_name)
    else:
        located = session.locate_parcel(point)
        parcel = located.parcel if located is not None else None

    match = session.nearest_facility(point, parcel)
    if match is None:
        raise HTTPException(status_code=404, detail="Shelter data not available")
    return {
        "name": match.facility.name,
        "location": list(match.facility.location),
        "distance_km": match.distance_km,
        "distance_miles": match.distance_miles,
    }


@router.get("/api/parcels/locate")
async def api_locate_parcel(
    request: Request,
    lon: float = Query(...),
    lat: float = Query(...),
) -> dict[str, Any]:
    """Parcel containing the point."""
    session = _get_session(request)
    match = session.locate_parcel(_point(lon, lat))
    if match is None:
        raise HTTPException(status_code=404, detail="No parcel at this point")
    return {"distance_km": match.distance_km, "parcel": _parcel_summary(match.parcel)}


@router.get("/api/parcels/search")
async def api_search_parcel(request: Request, q: str = Query(..., min_length=1)) -> dict[str, Any]:
    """Best parcel whose name matches the query."""
    session = _get_session(request)
    parcel = session.find_parcel(q)
    if parcel is None:
        raise HTTPException(status_code=404, detail=f"No parcel found matching {q!r}")
    return _parcel_summary(parcel)


@router.get("/api/parcels/percentile/{metric}")
async def api_percentile(
    metric: ParcelMetric,
    request: Request,
    value: float = Query(...),
) -> dict[str, Any]:
    """Percentile rank of a value among the loaded parcels."""
    session = _get_session(request)
    rank = session.percentile_of(metric, value)
    if rank is None:
        raise HTTPException(status_code=404, detail=f"No {metric} distribution available")
    return {"metric": str(metric), "value": value, "percentile": rank}


@router.get("/api/parcels/breaks")
async def api_breaks(request: Request) -> dict[str, Any]:
    """Value-per-square-metre class breaks and range."""
    session = _get_session(request)
    layer = session.parcels
    summary = layer.value_summary
    return {
        "class_count": layer.breaks.class_count,
        "thresholds": list(layer.breaks.thresholds),
        "summary": summary.model_dump() if summary is not None else None,
    }


@router.get("/api/premium")
async def api_premium(
    request: Request,
    total_value: float = Query(...),
    zone: ZoneId | None = None,
) -> dict[str, Any]:
    """Premium estimate for a zone (omit for "no mapped zone") and value."""
    session = _get_session(request)
    estimate = session.premium_estimate(zone, total_value)
    if estimate is None:
        raise HTTPException(status_code=422, detail="total_value must be a finite number")
    return estimate.model_dump(mode="json")


@router.get("/api/assess")
async def api_assess(
    request: Request,
    lon: float = Query(...),
    lat: float = Query(...),
) -> dict[str, Any]:
    """Zone, parcel, nearest shelter and premium for a point."""
    session = _get_session(request)
    assessment = session.assess(_point(lon, lat))
    zone = assessment.zone
    parcel = assessment.parcel
    facility = assessment.facility
    return {
        "point": list(assessment.point),
        "zone": None if zone is None else {
            "zone_id": str(zone.zone_id),
            "elevation": zone.elevation.model_dump(),
        },
        "risk_position": assessment.risk_position,
        "parcel": None if parcel is None else {
            "distance_km": parcel.distance_km,
            **_parcel_summary(parcel.parcel),
        },
        "facility": None if facility is None else {
            "name": facility.facility.name,
            "location": list(facility.facility.location),
            "distance_km": facility.distance_km,
            "distance_miles": facility.distance_miles,
        },
        "premium": None if assessment.premium is None else assessment.premium.model_dump(mode="json"),
    }
