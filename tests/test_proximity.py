"""Tests for great-circle distance and nearby search."""

import pytest

from jeevraksha.services.proximity import GeoPoint, closest, find_nearby, haversine_km, point_of

DELHI = GeoPoint(28.6139, 77.2090)
MUMBAI = GeoPoint(19.0760, 72.8777)
GURUGRAM = GeoPoint(28.4595, 77.0266)

CANDIDATES = [
    {"id": "mumbai", "latitude": MUMBAI.lat, "longitude": MUMBAI.lon},
    {"id": "gurugram", "latitude": GURUGRAM.lat, "longitude": GURUGRAM.lon},
    {"id": "delhi", "latitude": 28.6280, "longitude": 77.2189},
    {"id": "unlocated", "latitude": None, "longitude": None},
]


def test_distance_to_self_is_zero():
    assert haversine_km(DELHI, DELHI) == 0


def test_distance_is_symmetric():
    assert abs(haversine_km(DELHI, MUMBAI) - haversine_km(MUMBAI, DELHI)) < 1e-9


def test_delhi_to_mumbai():
    assert haversine_km(DELHI, MUMBAI) == pytest.approx(1150, abs=20)


def test_antipodes_are_half_circumference():
    assert haversine_km(GeoPoint(0, 0), GeoPoint(0, 180)) == pytest.approx(20015, abs=5)


def test_point_of_reads_coordinates():
    assert point_of({"latitude": "28.5", "longitude": 77}) == GeoPoint(28.5, 77.0)
    assert point_of({"lat": 1, "lng": 2}, "lat", "lng") == GeoPoint(1, 2)


def test_point_of_missing_or_bad_coordinates():
    assert point_of({"latitude": 28.5}) is None
    assert point_of({"latitude": None, "longitude": 77}) is None
    assert point_of({"latitude": "north", "longitude": 77}) is None


def test_find_nearby_filters_and_sorts():
    results = find_nearby(DELHI, CANDIDATES, radius_km=50)
    assert [r["id"] for r in results] == ["delhi", "gurugram"]
    assert results[0]["distance_km"] <= results[1]["distance_km"]
    assert all(r["distance_km"] <= 50 for r in results)


def test_find_nearby_does_not_mutate_candidates():
    find_nearby(DELHI, CANDIDATES)
    assert all("distance_km" not in c for c in CANDIDATES)


def test_find_nearby_zero_radius_only_exact_matches():
    candidates = [{"id": "here", "latitude": DELHI.lat, "longitude": DELHI.lon}, *CANDIDATES]
    assert [r["id"] for r in find_nearby(DELHI, candidates, radius_km=0)] == ["here"]


def test_find_nearby_radius_decides_inclusion():
    mumbai = [{"id": "mumbai", "latitude": MUMBAI.lat, "longitude": MUMBAI.lon}]
    assert find_nearby(DELHI, mumbai, radius_km=100) == []
    results = find_nearby(DELHI, mumbai, radius_km=1200)
    assert results[0]["distance_km"] == pytest.approx(1150, abs=20)


def test_find_nearby_empty_candidates():
    assert find_nearby(DELHI, []) == []


def test_find_nearby_nothing_in_range():
    assert find_nearby(GeoPoint(51.5, -0.12), CANDIDATES, radius_km=50) == []


def test_find_nearby_custom_keys():
    candidates = [{"id": "x", "lat": GURUGRAM.lat, "lng": GURUGRAM.lon}]
    results = find_nearby(DELHI, candidates, lat_key="lat", lon_key="lng")
    assert results[0]["id"] == "x"


def test_closest_ignores_radius():
    results = closest(GeoPoint(51.5, -0.12), CANDIDATES, limit=2)
    assert len(results) == 2
    assert results[0]["distance_km"] <= results[1]["distance_km"]


def test_closest_excludes_unlocated_candidates():
    results = closest(DELHI, CANDIDATES, limit=10)
    assert [r["id"] for r in results] == ["delhi", "gurugram", "mumbai"]


def test_closest_non_positive_limit():
    assert closest(DELHI, CANDIDATES, limit=0) == []
    assert closest(DELHI, CANDIDATES, limit=-1) == []


def test_near_antipodal_points_do_not_overflow():
    a = GeoPoint(-87.5, 10.0)
    b = GeoPoint(87.5, -170.0)
    assert haversine_km(a, b) == pytest.approx(20015, abs=5)
    candidates = [{"id": "far", "latitude": b.lat, "longitude": b.lon}]
    assert find_nearby(a, candidates) == []
    assert [r["id"] for r in closest(a, candidates, limit=1)] == ["far"]
