"""Geodesy — great-circle distance, search bounding boxes and distance ranking.

Invariants:
    - Distances in meters over a sphere of mean Earth radius (6 371 008.8 m)
    - bounding_box() never excludes a point within the radius (poles and
      antimeridian included); it may include extra points
    - rank_by_distance() keeps distance <= radius, orders by (distance, id),
      and returns at most `limit` entries
"""

import math
from dataclasses import dataclass
from typing import Iterable

EARTH_RADIUS_M = 6_371_008.8

# Relative slack so that floating error at the box edge never drops a point.
_BOX_SLACK = 1e-9


@dataclass(frozen=True)
class BoundingBox:
    """Latitude band plus one or two longitude ranges (two when crossing ±180)."""
    min_lat: float
    max_lat: float
    lon_ranges: tuple[tuple[float, float], ...]

    @property
    def covers_all_longitudes(self) -> bool:
        return self.lon_ranges == ((-180.0, 180.0),)


@dataclass(frozen=True)
class GeoPoint:
    id: int
    latitude: float
    longitude: float


@dataclass(frozen=True)
class RankedPoint:
    id: int
    distance: float


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in meters."""
    phi1, lam1, phi2, lam2 = map(math.radians, (lat1, lon1, lat2, lon2))
    dphi = phi2 - phi1
    dlam = lam2 - lam1
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlam / 2) ** 2
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(a))


def bounding_box(lat: float, lon: float, radius_m: float) -> BoundingBox:
    """Smallest lat/lon box containing the spherical cap around (lat, lon)."""
    angular = radius_m / EARTH_RADIUS_M * (1 + _BOX_SLACK)
    if angular >= math.pi:
        return BoundingBox(-90.0, 90.0, ((-180.0, 180.0),))

    dlat = math.degrees(angular)
    min_lat, max_lat = lat - dlat, lat + dlat
    if min_lat <= -90.0 or max_lat >= 90.0:
        # Cap touches a pole: every meridian passes through it.
        return BoundingBox(max(min_lat, -90.0), min(max_lat, 90.0), ((-180.0, 180.0),))

    dlon = math.degrees(math.asin(math.sin(angular) / math.cos(math.radians(lat))))
    min_lon, max_lon = lon - dlon, lon + dlon
    if min_lon < -180.0:
        ranges = ((min_lon + 360.0, 180.0), (-180.0, max_lon))
    elif max_lon > 180.0:
        ranges = ((min_lon, 180.0), (-180.0, max_lon - 360.0))
    else:
        ranges = ((min_lon, max_lon),)
    return BoundingBox(min_lat, max_lat, ranges)


def rank_by_distance(
    lat: float, lon: float, radius_m: float, limit: int,
    points: Iterable[GeoPoint],
) -> list[RankedPoint]:
    """Points within radius_m of (lat, lon), nearest first, ties by id."""
    if limit <= 0:
        return []
    ranked = []
    for point in points:
        distance = haversine_m(lat, lon, point.latitude, point.longitude)
        if distance <= radius_m:
            ranked.append(RankedPoint(point.id, distance))
    ranked.sort(key=lambda r: (r.distance, r.id))
    return ranked[:limit]
