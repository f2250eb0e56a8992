"""Pydantic schemas"""
from typing import Optional, List
from pydantic import BaseModel


# === Responses ===

class MuseumOut(BaseModel):
    id: str
    name: str
    region: str = ""
    region_id: Optional[str] = None
    region_slug: Optional[str] = None
    province_name: Optional[str] = None
    province_slug: Optional[str] = None
    address: str = ""
    lot_address: str = ""
    facility_type: str = ""
    phone_number: str = ""
    organization_name: str = ""
    homepage_url: str = ""
    description: str = ""
    transport_info: str = ""
    reference_date: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distance_km: Optional[float] = None  # nearby search only


class MuseumListResponse(BaseModel):
    page: int
    size: int
    total_count: int
    items: List[MuseumOut]


class NearbyResponse(BaseModel):
    items: List[MuseumOut]
    total_count: int
    distance_km: float
    limit: int
    fallback: bool = False


class RegionOut(BaseModel):
    id: str
    name: str
    slug: str
    parent_id: Optional[str] = None
    parent_name: Optional[str] = None
    parent_slug: Optional[str] = None
    count: int


class ParentRegionOut(BaseModel):
    id: str
    name: str
    slug: str
    count: int


class RegionSummaryOut(BaseModel):
    total_regions: int
    total_parent_regions: int
    assigned_museums: int
    unassigned_museums: int


class RegionListResponse(BaseModel):
    items: List[RegionOut]
    parents: List[ParentRegionOut]
    summary: RegionSummaryOut
