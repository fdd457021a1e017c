"""Tests for great-circle distance."""

import math

import pytest
from pydantic import ValidationError

from eventwindows.config import GeoPoint
from eventwindows.geo import EARTH_RADIUS_M, distance_meters, is_within_radius

from conftest import VENUE

NEARBY = {"lat": 33.7005, "lng": -117.9005}


class TestDistance:
    """Tests for the haversine distance."""

    @pytest.mark.parametrize(
        "point",
        [
            VENUE,
            {"lat": 0, "lng": 0},
            {"lat": 90, "lng": 0},
            {"lat": -89.999999, "lng": 180},
            {"lat": 51.477928, "lng": -0.001545},
            {"lat": 37.774929, "lng": -122.419416},
        ],
    )
    def test_same_point_is_zero(self, point):
        distance = distance_meters(point, point)
        assert distance == 0.0
        assert not math.isnan(distance)

    @pytest.mark.parametrize(
        "a,b",
        [
            (VENUE, NEARBY),
            ({"lat": 10.7769, "lng": 106.7009}, {"lat": 10.78, "lng": 106.705}),
            ({"lat": 0, "lng": 179.9}, {"lat": 0, "lng": -179.9}),
        ],
    )
    def test_symmetric(self, a, b):
        assert distance_meters(a, b) == distance_meters(b, a)

    def test_venue_nearby(self):
        assert distance_meters(VENUE, NEARBY) == pytest.approx(72.3, abs=0.5)

    def test_one_degree_of_latitude(self):
        expected = EARTH_RADIUS_M * math.pi / 180
        assert distance_meters({"lat": 0, "lng": 0}, {"lat": 1, "lng": 0}) == pytest.approx(expected)

    def test_across_antimeridian(self):
        # 0.2 degrees of longitude at the equator, not 359.8
        distance = distance_meters({"lat": 0, "lng": 179.9}, {"lat": 0, "lng": -179.9})
        assert distance == pytest.approx(EARTH_RADIUS_M * math.radians(0.2))

    def test_antipodes(self):
        distance = distance_meters({"lat": 0, "lng": 0}, {"lat": 0, "lng": 180})
        assert distance == pytest.approx(math.pi * EARTH_RADIUS_M)

    def test_accepts_geopoints(self):
        assert distance_meters(GeoPoint(**VENUE), GeoPoint(**NEARBY)) == distance_meters(
            VENUE, NEARBY
        )

    def test_rejects_out_of_range(self):
        with pytest.raises(ValidationError):
            distance_meters({"lat": 91, "lng": 0}, VENUE)


class TestGeodesicAccuracy:
    """
    Haversine against WGS-84 ellipsoid distances for venue-scale baselines.

    Reference values: along the equator the geodesic is a * dlng with
    a = 6378137 m. Along a meridian the arc per degree at latitude phi is
    111132.954 - 559.822 cos(2 phi) + 1.175 cos(4 phi) meters.
    """

    @pytest.mark.parametrize(
        "a,b,geodesic",
        [
            # equator, 0.01 and 0.27 degrees of longitude
            ({"lat": 0, "lng": 0}, {"lat": 0, "lng": 0.01}, 1113.195),
            ({"lat": 0, "lng": 10}, {"lat": 0, "lng": 10.27}, 30056.27),
            # meridian arcs centered on 45 and 60 degrees north
            ({"lat": 44.9, "lng": 7}, {"lat": 45.1, "lng": 7}, 22226.36),
            ({"lat": 59.8, "lng": 10}, {"lat": 60.2, "lng": 10}, 44564.91),
        ],
    )
    def test_within_half_percent(self, a, b, geodesic):
        assert distance_meters(a, b) == pytest.approx(geodesic, rel=0.005)


class TestWithinRadius:
    """Tests for the radius helper."""

    @pytest.mark.parametrize("radius,expected", [(200, True), (73, True), (72, False), (50, False)])
    def test_radius(self, radius, expected):
        assert is_within_radius(NEARBY, VENUE, radius) is expected
