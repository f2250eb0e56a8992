"""Museum endpoints"""
import logging
import math
import time
from typing import Optional

from fastapi import APIRouter, Depends, Query, HTTPException, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import (
    LIST_DEFAULT_PAGE_SIZE,
    LIST_MAX_PAGE,
    LIST_MAX_PAGE_SIZE,
    NEARBY_DEFAULT_LIMIT,
    NEARBY_DEFAULT_RADIUS_KM,
    NEARBY_MAX_LIMIT,
    NEARBY_MAX_RADIUS_KM,
    REGIONS_CACHE_TTL,
)
from ..database import get_db
from ..schemas import MuseumListResponse, NearbyResponse, RegionListResponse
from ..services.geo import MIN_RADIUS_KM, is_latitude_in_range, is_longitude_in_range
from ..services.search import get_region_summary, search_museums, search_nearby

logger = logging.getLogger(__name__)

# Cache for read-mostly region data (with TTL)
_cache = {}


def _cached(key, fn, ttl=REGIONS_CACHE_TTL):
    """Simple TTL cache"""
    now = time.time()
    if key in _cache and now - _cache[key][1] < ttl:
        return _cache[key][0]
    result = fn()
    _cache[key] = (result, now)
    return result


router = APIRouter(prefix="/api/v1", tags=["museums"])

NO_STORE = {"Cache-Control": "no-store"}


def parse_number_param(value: Optional[str]) -> Optional[float]:
    """Lenient numeric query param; None when missing, non-numeric or non-finite"""
    if value is None or not value.strip():
        return None
    try:
        parsed = float(value)
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


def clamp(value: float, minimum: float, maximum: float) -> float:
    return min(max(value, minimum), maximum)


@router.get("/museums", response_model=MuseumListResponse)
def list_museums(
    page: Optional[str] = Query(None, description="Page number (1-based)"),
    size: Optional[str] = Query(None, description="Page size"),
    keyword: Optional[str] = Query(None, description="Facility name (partial match)"),
    region: Optional[str] = Query(None, description="Region id, slug or name"),
    province: Optional[str] = Query(None, description="Province id, slug or name"),
    db: Session = Depends(get_db),
):
    page_num = int(parse_number_param(page) or 1)
    page_size = int(parse_number_param(size) or LIST_DEFAULT_PAGE_SIZE)
    if not 1 <= page_num <= LIST_MAX_PAGE:
        raise HTTPException(status_code=400, detail=f"page must be between 1 and {LIST_MAX_PAGE}.")
    if page_size < 1:
        raise HTTPException(status_code=400, detail="size must be positive.")
    page_size = min(page_size, LIST_MAX_PAGE_SIZE)

    try:
        items, total = search_museums(
            db,
            keyword=keyword.strip() if keyword else None,
            region=region.strip() if region else None,
            province=province.strip() if province else None,
            page=page_num,
            size=page_size,
        )
    except SQLAlchemyError as e:
        logger.exception("Museum listing failed")
        raise HTTPException(status_code=500, detail=str(e))

    return MuseumListResponse(page=page_num, size=page_size, total_count=total, items=items)


@router.get("/museums/nearby", response_model=NearbyResponse)
def nearby_museums(
    response: Response,
    lat: Optional[str] = Query(None, description="Latitude"),
    lon: Optional[str] = Query(None, description="Longitude"),
    distance_km: Optional[str] = Query(None, alias="distanceKm", description="Radius (km)"),
    limit: Optional[str] = Query(None, description="Max results"),
    db: Session = Depends(get_db),
):
    response.headers.update(NO_STORE)

    latitude = parse_number_param(lat)
    longitude = parse_number_param(lon)
    if latitude is None or longitude is None:
        raise HTTPException(
            status_code=400,
            detail="lat and lon query parameters are required and must be numeric.",
            headers=NO_STORE,
        )
    if not is_latitude_in_range(latitude) or not is_longitude_in_range(longitude):
        raise HTTPException(
            status_code=400,
            detail="lat must be between -90 and 90; lon must be between -180 and 180.",
            headers=NO_STORE,
        )

    radius_param = parse_number_param(distance_km)
    limit_param = parse_number_param(limit)
    radius_km = clamp(
        radius_param if radius_param is not None else NEARBY_DEFAULT_RADIUS_KM,
        MIN_RADIUS_KM, NEARBY_MAX_RADIUS_KM,
    )
    max_results = int(clamp(
        limit_param if limit_param is not None else NEARBY_DEFAULT_LIMIT,
        1, NEARBY_MAX_LIMIT,
    ))

    try:
        items, fallback = search_nearby(
            db, lat=latitude, lon=longitude, radius_km=radius_km, limit=max_results,
        )
    except SQLAlchemyError as e:
        logger.exception("Nearby search failed")
        raise HTTPException(status_code=500, detail=str(e), headers=NO_STORE)

    return NearbyResponse(
        items=items,
        total_count=len(items),
        distance_km=radius_km,
        limit=max_results,
        fallback=fallback,
    )


@router.get("/regions", response_model=RegionListResponse)
def list_regions(db: Session = Depends(get_db)):
    try:
        return _cached("regions", lambda: get_region_summary(db))
    except SQLAlchemyError as e:
        logger.exception("Region listing failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/health")
def health():
    return {"status": "ok"}
