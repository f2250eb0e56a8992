"""Map raw museum rows onto the public response shape.

Rows come from two places: ORM objects flattened by `museum_to_row`, and
records returned by the `find_nearby_museums` database function. Both use
the dataset's column names (facil_name, address_road, ...), but the
function may also hand back already-renamed keys, so each field has a
fallback.
"""
import math
import re
from typing import Any, Dict, Optional

from ..models import Museum, Region

REGION_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


def is_region_uuid(value: Optional[str]) -> bool:
    return bool(value and REGION_UUID_RE.match(value))


def derive_region(address: str) -> str:
    """First address token (the province)"""
    if not address:
        return ""
    tokens = address.split()
    return tokens[0] if tokens else address


def to_float(value: Any) -> Optional[float]:
    """Parse a numeric or numeric-string value; None if not finite"""
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def to_distance(value: Any) -> Optional[float]:
    parsed = to_float(value)
    return round(parsed, 1) if parsed is not None else None


def _first(row: Dict[str, Any], *keys: str, default: Any = "") -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return default


def _region_to_dict(region: Optional[Region]) -> Optional[Dict[str, Any]]:
    if region is None:
        return None
    parent = region.parent
    return {
        "id": region.id,
        "name": region.name,
        "slug": region.slug,
        "parent_region_id": region.parent_region_id,
        "parent": {"id": parent.id, "name": parent.name, "slug": parent.slug} if parent else None,
    }


def museum_to_row(museum: Museum, distance_km: Optional[float] = None) -> Dict[str, Any]:
    """Flatten an ORM museum (with its region) into a raw row dict"""
    row = {c.name: getattr(museum, c.name) for c in Museum.__table__.columns}
    row["regions"] = _region_to_dict(museum.region)
    if distance_km is not None:
        row["distance_km"] = distance_km
    return row


def normalize_museum(row: Dict[str, Any]) -> Dict[str, Any]:
    name = _first(row, "facil_name", "name")
    address = _first(row, "address_road", "address")
    lot_address = _first(row, "address_jb", "lot_address")
    region = row.get("regions") or None
    parent = (region or {}).get("parent") or None

    derived_id = re.sub(r"\s+", "-", f"{row.get('provider_code') or 'custom'}-{name}")
    row_id = row.get("id")

    return {
        "id": str(row_id) if row_id is not None else derived_id,
        "name": name,
        "region": (region or {}).get("name") or row.get("region") or derive_region(address or lot_address),
        "region_id": (region or {}).get("id") or row.get("region_id"),
        "region_slug": (region or {}).get("slug"),
        "province_name": (parent or region or {}).get("name"),
        "province_slug": (parent or region or {}).get("slug"),
        "address": address,
        "lot_address": lot_address,
        "facility_type": _first(row, "type", "facility_type"),
        "phone_number": _first(row, "phone_number", "phone", "admin_org_phone"),
        "organization_name": _first(row, "organization_name", "org_name", "admin_org"),
        "homepage_url": _first(row, "homepage_url", "org_site"),
        "description": _first(row, "description", "facil_intro"),
        "transport_info": _first(row, "transport_info", "transportation"),
        "reference_date": str(_first(row, "reference_date", "data_update_date")),
        "latitude": to_float(row.get("latitude")),
        "longitude": to_float(row.get("longitude")),
        "distance_km": to_distance(_first(row, "distance_km", "distanceKm", default=None)),
    }
