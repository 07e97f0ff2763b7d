"""
Geodesic measurement utilities for lon/lat polygons.
"""
from functools import lru_cache
from typing import Sequence

from pyproj import Geod


@lru_cache(maxsize=8)
def get_geod(ellipsoid: str = "WGS84") -> Geod:
    """
    Get a (cached) geodesic calculator for an ellipsoid.

    Args:
        ellipsoid: Ellipsoid name understood by PROJ (e.g. "WGS84", "GRS80")

    Returns:
        Geod instance
    """
    return Geod(ellps=ellipsoid)


def ring_area_m2(
    ring: Sequence[Sequence[float]],
    ellipsoid: str = "WGS84",
) -> float:
    """
    Calculate the unsigned geodesic area enclosed by a ring.

    Args:
        ring: List of [longitude, latitude] positions in degrees
        ellipsoid: Ellipsoid name

    Returns:
        Area in square meters
    """
    if len(ring) < 3:
        return 0.0

    lons = [float(position[0]) for position in ring]
    lats = [float(position[1]) for position in ring]

    # Signed by winding order; orientation is irrelevant for paddock area
    area, _ = get_geod(ellipsoid).polygon_area_perimeter(lons, lats)
    return abs(float(area))


def polygon_area_m2(
    rings: Sequence[Sequence[Sequence[float]]],
    ellipsoid: str = "WGS84",
) -> float:
    """
    Calculate the geodesic area of a polygon with optional holes.

    Args:
        rings: Polygon rings, outer boundary first
        ellipsoid: Ellipsoid name

    Returns:
        Outer ring area minus hole areas in square meters, never negative
    """
    if not rings:
        return 0.0

    outer = ring_area_m2(rings[0], ellipsoid)
    holes = sum(ring_area_m2(ring, ellipsoid) for ring in rings[1:])
    return max(0.0, outer - holes)
