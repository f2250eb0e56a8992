"""Geo utilities: DB-independent haversine distance and bounding box.

Both functions are total. Bad input never raises: the distance comes back
as NaN, and the bounding box widens to the whole globe.
"""
import math
from typing import NamedTuple

EARTH_RADIUS_KM = 6371.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_RADIUS_KM = 0.1


class GeoCoordinate(NamedTuple):
    latitude: float
    longitude: float


class BoundingBox(NamedTuple):
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float


WHOLE_GLOBE = BoundingBox(MIN_LATITUDE, MAX_LATITUDE, MIN_LONGITUDE, MAX_LONGITUDE)


def clamp_latitude(value: float) -> float:
    return min(max(value, MIN_LATITUDE), MAX_LATITUDE)


def clamp_longitude(value: float) -> float:
    return min(max(value, MIN_LONGITUDE), MAX_LONGITUDE)


def is_latitude_in_range(value: float) -> bool:
    return math.isfinite(value) and MIN_LATITUDE <= value <= MAX_LATITUDE


def is_longitude_in_range(value: float) -> bool:
    return math.isfinite(value) and MIN_LONGITUDE <= value <= MAX_LONGITUDE


def is_valid_coordinate(point: GeoCoordinate) -> bool:
    return is_latitude_in_range(point.latitude) and is_longitude_in_range(point.longitude)


def haversine_distance_km(origin: GeoCoordinate, destination: GeoCoordinate) -> float:
    """Return the great-circle distance in km, or NaN if either point is invalid."""
    if not (is_valid_coordinate(origin) and is_valid_coordinate(destination)):
        return math.nan

    dlat = math.radians(destination.latitude - origin.latitude)
    dlng = math.radians(destination.longitude - origin.longitude)
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(destination.latitude)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    a = min(1.0, max(0.0, a))  # rounding near antipodes
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def compute_bounding_box(center: GeoCoordinate, radius_km: float) -> BoundingBox:
    """Return a rectangle that contains every point within radius_km of center.

    Used as a coarse pre-filter before the exact haversine check, so it may
    include extra points but never drops one. An invalid center (or radius)
    yields the whole globe.
    """
    if not is_valid_coordinate(center) or math.isnan(radius_km):
        return WHOLE_GLOBE

    radius_km = max(radius_km, MIN_RADIUS_KM)
    angular = radius_km / EARTH_RADIUS_KM
    lat_rad = math.radians(center.latitude)
    lng_rad = math.radians(center.longitude)

    min_lat = clamp_latitude(math.degrees(lat_rad - angular))
    max_lat = clamp_latitude(math.degrees(lat_rad + angular))

    # Circle touches a pole: any longitude may be in range
    if min_lat <= MIN_LATITUDE or max_lat >= MAX_LATITUDE:
        return BoundingBox(min_lat, max_lat, MIN_LONGITUDE, MAX_LONGITUDE)

    dlng = math.asin(min(1.0, math.sin(angular) / math.cos(lat_rad)))
    min_lng = math.degrees(lng_rad - dlng)
    max_lng = math.degrees(lng_rad + dlng)

    # No split ranges: a circle crossing the antimeridian gets every longitude
    if min_lng < MIN_LONGITUDE or max_lng > MAX_LONGITUDE:
        return BoundingBox(min_lat, max_lat, MIN_LONGITUDE, MAX_LONGITUDE)

    return BoundingBox(min_lat, max_lat, clamp_longitude(min_lng), clamp_longitude(max_lng))
