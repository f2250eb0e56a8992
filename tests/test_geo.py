"""Haversine distance and bounding box"""
import math

import pytest

from museum_api.services.geo import (
    EARTH_RADIUS_KM,
    WHOLE_GLOBE,
    GeoCoordinate,
    compute_bounding_box,
    haversine_distance_km,
)

SEOUL = GeoCoordinate(37.5665, 126.978)
LONDON = GeoCoordinate(51.5074, -0.1278)
NEW_YORK = GeoCoordinate(40.7128, -74.006)


def destination_point(origin: GeoCoordinate, bearing_deg: float, distance_km: float) -> GeoCoordinate:
    """Point reached from origin along a great circle (spherical direct problem)"""
    lat1 = math.radians(origin.latitude)
    lng1 = math.radians(origin.longitude)
    theta = math.radians(bearing_deg)
    delta = distance_km / EARTH_RADIUS_KM

    lat2 = math.asin(
        math.sin(lat1) * math.cos(delta) + math.cos(lat1) * math.sin(delta) * math.cos(theta)
    )
    lng2 = lng1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(lat1),
        math.cos(delta) - math.sin(lat1) * math.sin(lat2),
    )
    # normalise to [-180, 180)
    lng2_deg = (math.degrees(lng2) + 540) % 360 - 180
    return GeoCoordinate(math.degrees(lat2), lng2_deg)


def assert_in_box(point, box):
    assert box.min_latitude <= point.latitude <= box.max_latitude
    assert box.min_longitude <= point.longitude <= box.max_longitude


class TestHaversineDistance:
    def test_identical_points(self):
        assert haversine_distance_km(SEOUL, SEOUL) == 0

    def test_london_new_york(self):
        distance = haversine_distance_km(LONDON, NEW_YORK)
        assert 5500 < distance < 5600
        assert distance == pytest.approx(5570, abs=1)

    def test_symmetric(self):
        pairs = [(LONDON, NEW_YORK), (SEOUL, LONDON), (GeoCoordinate(-33.87, 151.21), NEW_YORK)]
        for a, b in pairs:
            assert haversine_distance_km(a, b) == haversine_distance_km(b, a)

    def test_across_antimeridian(self):
        a = GeoCoordinate(0, 179.5)
        b = GeoCoordinate(0, -179.5)
        # 1 degree of longitude on the equator
        assert haversine_distance_km(a, b) == pytest.approx(EARTH_RADIUS_KM * math.radians(1), rel=1e-9)

    def test_antipodal_points(self):
        distance = haversine_distance_km(GeoCoordinate(0, 0), GeoCoordinate(0, 180))
        assert distance == pytest.approx(math.pi * EARTH_RADIUS_KM)

    @pytest.mark.parametrize("origin", [
        GeoCoordinate(120, 0),
        GeoCoordinate(-90.01, 0),
        GeoCoordinate(0, 180.5),
        GeoCoordinate(0, -181),
        GeoCoordinate(math.nan, 0),
        GeoCoordinate(0, math.inf),
    ])
    def test_invalid_input_returns_nan(self, origin):
        assert math.isnan(haversine_distance_km(origin, GeoCoordinate(0, 0)))
        assert math.isnan(haversine_distance_km(GeoCoordinate(0, 0), origin))

    def test_range_bounds_are_valid(self):
        distance = haversine_distance_km(GeoCoordinate(90, 180), GeoCoordinate(-90, -180))
        assert math.isfinite(distance)
        assert distance >= 0


class TestBoundingBox:
    def test_contains_center(self):
        box = compute_bounding_box(SEOUL, 25)
        assert box.min_latitude < SEOUL.latitude < box.max_latitude
        assert box.min_longitude < SEOUL.longitude < box.max_longitude

    @pytest.mark.parametrize("center", [
        SEOUL,
        GeoCoordinate(0, 0),
        GeoCoordinate(-33.8688, 151.2093),
        GeoCoordinate(64.1466, -21.9426),
        GeoCoordinate(0, 179.9),
        GeoCoordinate(-45, -179.95),
    ])
    @pytest.mark.parametrize("radius_km", [1, 25, 100])
    def test_contains_points_on_radius(self, center, radius_km):
        box = compute_bounding_box(center, radius_km)
        for bearing in range(0, 360, 15):
            point = destination_point(center, bearing, radius_km * 0.999)
            assert haversine_distance_km(center, point) <= radius_km
            assert_in_box(point, box)

    @pytest.mark.parametrize("center,radius_km", [
        (SEOUL, 25),
        (GeoCoordinate(89.99, 10), 5000),
        (GeoCoordinate(-89.99, -170), 100),
        (GeoCoordinate(10, 179.99), 100),
        (GeoCoordinate(0, -180), 0),
        (GeoCoordinate(45, 90), 1e6),
    ])
    def test_bounds_within_canonical_ranges(self, center, radius_km):
        box = compute_bounding_box(center, radius_km)
        assert -90 <= box.min_latitude <= box.max_latitude <= 90
        assert -180 <= box.min_longitude <= box.max_longitude <= 180

    def test_equatorial_latitude_delta(self):
        center = GeoCoordinate(0, 0)
        radius_km = 50
        box = compute_bounding_box(center, radius_km)

        expected = (radius_km / 6371) * (180 / math.pi)
        assert box.max_latitude - center.latitude == pytest.approx(expected, abs=1e-3)
        assert center.latitude - box.min_latitude == pytest.approx(expected, abs=1e-3)

    def test_near_north_pole(self):
        box = compute_bounding_box(GeoCoordinate(89.5, 45), 100)
        assert box.min_latitude > 0
        assert box.max_latitude == 90
        assert box.min_longitude == -180
        assert box.max_longitude == 180

    def test_near_south_pole(self):
        box = compute_bounding_box(GeoCoordinate(-89.5, -60), 100)
        assert box.min_latitude == -90
        assert box.max_latitude < 0
        assert (box.min_longitude, box.max_longitude) == (-180, 180)

    def test_crossing_antimeridian_widens_longitude(self):
        box = compute_bounding_box(GeoCoordinate(0, 179.9), 50)
        assert (box.min_longitude, box.max_longitude) == (-180, 180)
        assert box.min_latitude < 0 < box.max_latitude

    @pytest.mark.parametrize("center", [
        GeoCoordinate(91, 0),
        GeoCoordinate(-120, 10),
        GeoCoordinate(0, 200),
        GeoCoordinate(math.nan, 0),
        GeoCoordinate(0, -math.inf),
    ])
    def test_invalid_center_returns_whole_globe(self, center):
        assert compute_bounding_box(center, 25) == WHOLE_GLOBE
        assert compute_bounding_box(center, 25) == (-90, 90, -180, 180)

    @pytest.mark.parametrize("radius_km", [0, -5, 0.01])
    def test_degenerate_radius_is_floored(self, radius_km):
        box = compute_bounding_box(SEOUL, radius_km)
        assert box == compute_bounding_box(SEOUL, 0.1)
        assert box.min_latitude < box.max_latitude
        assert box.min_longitude < box.max_longitude

    def test_nan_radius_returns_whole_globe(self):
        assert compute_bounding_box(SEOUL, math.nan) == WHOLE_GLOBE
