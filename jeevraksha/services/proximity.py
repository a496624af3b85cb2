"""Great-circle proximity search over organizations with a registered location."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

EARTH_RADIUS_KM = 6371.0
DEFAULT_RADIUS_KM = 50.0


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lon: float


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Spherical-earth distance between two points in kilometres."""
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dlambda = math.radians(b.lon - a.lon)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # Rounding can push h just past 1 for near-antipodal points
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def point_of(candidate: Mapping[str, Any], lat_key: str = "latitude", lon_key: str = "longitude") -> GeoPoint | None:
    """Read a candidate's coordinate, or None if either half is missing."""
    lat = candidate.get(lat_key)
    lon = candidate.get(lon_key)
    if lat is None or lon is None:
        return None
    try:
        return GeoPoint(float(lat), float(lon))
    except (TypeError, ValueError):
        return None


def _with_distances(
    origin: GeoPoint,
    candidates: Iterable[Mapping[str, Any]],
    lat_key: str,
    lon_key: str,
) -> list[dict[str, Any]]:
    annotated = []
    for candidate in candidates:
        point = point_of(candidate, lat_key, lon_key)
        if point is None:
            continue
        annotated.append({**candidate, "distance_km": haversine_km(origin, point)})
    annotated.sort(key=lambda c: c["distance_km"])
    return annotated


def find_nearby(
    origin: GeoPoint,
    candidates: Iterable[Mapping[str, Any]],
    radius_km: float = DEFAULT_RADIUS_KM,
    lat_key: str = "latitude",
    lon_key: str = "longitude",
) -> list[dict[str, Any]]:
    """Candidates within ``radius_km`` of ``origin``, nearest first.

    Each result is a copy of the candidate with a ``distance_km`` key added.
    Candidates without a coordinate never match.
    """
    return [
        c for c in _with_distances(origin, candidates, lat_key, lon_key)
        if c["distance_km"] <= radius_km
    ]


def closest(
    origin: GeoPoint,
    candidates: Iterable[Mapping[str, Any]],
    limit: int,
    lat_key: str = "latitude",
    lon_key: str = "longitude",
) -> list[dict[str, Any]]:
    """The ``limit`` nearest candidates regardless of distance.

    Used when a radius search comes back empty. Candidates without a
    coordinate are excluded here too.
    """
    if limit <= 0:
        return []
    return _with_distances(origin, candidates, lat_key, lon_key)[:limit]
