"""Search services"""
import logging
from typing import Optional, List, Tuple, Dict, Any

from sqlalchemy import func, or_, text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session, joinedload

from ..config import NEARBY_FALLBACK_LIMIT
from ..models import Museum, Region
from .geo import GeoCoordinate, compute_bounding_box, haversine_distance_km
from .normalize import is_region_uuid, museum_to_row, normalize_museum, to_float

logger = logging.getLogger(__name__)

NEARBY_FUNCTION_SQL = text(
    "SELECT * FROM find_nearby_museums(:lat, :lon, :radius_km, :limit_rows)"
)

# Errors meaning the proximity function or its extensions are not installed
FALLBACK_MARKERS = ("find_nearby_museums", "earthdistance", "cube")


def resolve_region_id(db: Session, value: Optional[str]) -> Optional[str]:
    """Region UUID, slug or name -> region id"""
    if not value:
        return None
    if is_region_uuid(value):
        return value

    region_id = db.query(Region.id).filter(Region.slug == value).scalar()
    if region_id:
        return region_id
    return db.query(Region.id).filter(Region.name == value).limit(1).scalar()


def _target_region_ids(
    db: Session, region: Optional[str], province: Optional[str]
) -> Tuple[Optional[List[str]], bool]:
    """Region ids to filter on, plus whether the filter already rules out every row."""
    targeted = None

    if region:
        region_id = resolve_region_id(db, region)
        if not region_id:
            return None, True
        targeted = [region_id]

    if province:
        parent_id = resolve_region_id(db, province)
        if not parent_id:
            return None, True
        child_ids = [
            r[0] for r in db.query(Region.id).filter(
                or_(Region.id == parent_id, Region.parent_region_id == parent_id)
            )
        ]
        if not child_ids:
            return None, True
        if targeted:
            targeted = [rid for rid in targeted if rid in child_ids]
            if not targeted:
                return None, True
        else:
            targeted = child_ids

    return targeted, False


def search_museums(
    db: Session,
    keyword: Optional[str] = None,
    region: Optional[str] = None,
    province: Optional[str] = None,
    page: int = 1,
    size: int = 50,
) -> Tuple[List[Dict[str, Any]], int]:
    """Paginated museum listing"""
    region_ids, empty = _target_region_ids(db, region, province)
    if empty:
        return [], 0

    query = db.query(Museum).options(
        joinedload(Museum.region).joinedload(Region.parent)
    )

    if keyword:
        query = query.filter(Museum.facil_name.ilike(f"%{keyword}%"))

    if region_ids:
        query = query.filter(Museum.region_id.in_(region_ids))

    total = query.count()
    museums = (
        query.order_by(Museum.facil_name)
        .offset((page - 1) * size)
        .limit(size)
        .all()
    )
    return [normalize_museum(museum_to_row(m)) for m in museums], total


def _should_fallback(exc: DBAPIError) -> bool:
    message = str(exc.orig if exc.orig is not None else exc).lower()
    return any(marker in message for marker in FALLBACK_MARKERS)


def _search_nearby_in_app(
    db: Session, lat: float, lon: float, radius_km: float, limit: int
) -> List[Dict[str, Any]]:
    """Bounding-box pre-filter, then exact haversine distance"""
    origin = GeoCoordinate(lat, lon)
    bbox = compute_bounding_box(origin, radius_km)

    candidates = (
        db.query(Museum)
        .options(joinedload(Museum.region).joinedload(Region.parent))
        .filter(
            Museum.latitude.isnot(None),
            Museum.longitude.isnot(None),
            Museum.latitude >= bbox.min_latitude,
            Museum.latitude <= bbox.max_latitude,
            Museum.longitude >= bbox.min_longitude,
            Museum.longitude <= bbox.max_longitude,
        )
        .limit(NEARBY_FALLBACK_LIMIT)
        .all()
    )

    results = []
    for museum in candidates:
        m_lat = to_float(museum.latitude)
        m_lon = to_float(museum.longitude)
        if m_lat is None or m_lon is None:
            continue
        dist = haversine_distance_km(origin, GeoCoordinate(m_lat, m_lon))
        # NaN fails this comparison too
        if not dist <= radius_km:
            continue
        results.append((museum, dist))

    results.sort(key=lambda x: x[1])
    return [normalize_museum(museum_to_row(m, dist)) for m, dist in results[:limit]]


def search_nearby(
    db: Session,
    lat: float,
    lon: float,
    radius_km: float = 25.0,
    limit: int = 25,
) -> Tuple[List[Dict[str, Any]], bool]:
    """Nearby search. Returns (items, fallback_used).

    Tries the server-side `find_nearby_museums` function first and falls
    back to in-app filtering when the database does not provide it.
    """
    try:
        rows = db.execute(
            NEARBY_FUNCTION_SQL,
            {"lat": lat, "lon": lon, "radius_km": radius_km, "limit_rows": limit},
        ).mappings().all()
    except DBAPIError as e:
        if not _should_fallback(e):
            raise
        db.rollback()
        logger.warning(
            f"Falling back to in-app distance calculation "
            f"(radius_km={radius_km}, limit={limit}): {e.orig}"
        )
        return _search_nearby_in_app(db, lat, lon, radius_km, limit), True

    items = [normalize_museum(dict(row)) for row in rows]
    logger.info(f"Proximity query succeeded: {len(items)} museums within {radius_km} km")
    return items, False


def get_region_summary(db: Session) -> Dict[str, Any]:
    """Regions with museum counts"""
    counts = dict(
        db.query(Museum.region_id, func.count(Museum.id))
        .filter(Museum.region_id.isnot(None))
        .group_by(Museum.region_id)
        .all()
    )
    unassigned = db.query(func.count(Museum.id)).filter(Museum.region_id.is_(None)).scalar()

    children = (
        db.query(Region)
        .options(joinedload(Region.parent))
        .filter(Region.parent_region_id.isnot(None))
        .order_by(Region.name)
        .all()
    )
    parents = (
        db.query(Region)
        .filter(Region.parent_region_id.is_(None))
        .order_by(Region.name)
        .all()
    )

    child_items = [{
        "id": r.id,
        "name": r.name,
        "slug": r.slug,
        "parent_id": r.parent_region_id,
        "parent_name": r.parent.name if r.parent else None,
        "parent_slug": r.parent.slug if r.parent else None,
        "count": counts.get(r.id, 0),
    } for r in children]

    parent_items = []
    for r in parents:
        descendant = sum(c["count"] for c in child_items if c["parent_id"] == r.id)
        parent_items.append({
            "id": r.id,
            "name": r.name,
            "slug": r.slug,
            "count": counts.get(r.id, 0) + descendant,
        })

    return {
        "items": child_items,
        "parents": parent_items,
        "summary": {
            "total_regions": len(child_items),
            "total_parent_regions": len(parent_items),
            "assigned_museums": sum(counts.values()),
            "unassigned_museums": unassigned,
        },
    }
