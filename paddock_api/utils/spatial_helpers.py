"""
Spatial helper functions for GeoJSON positions and rings.

Provides utilities for:
- Position type and range checks
- Ring closure
- Vertex averaging
- Bounding box folds
"""
import math
from typing import Any, Iterable, Optional, Sequence

import numpy as np

from paddock_api.domain.constants import GeoJSONLimits


def is_finite_number(value: Any) -> bool:
    """
    Check whether a value is a finite int or float (bools excluded).

    Args:
        value: Any JSON value

    Returns:
        True for finite numbers
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # Integers too large for a float
        return False


def position_error(position: Any, context: str) -> Optional[str]:
    """
    Validate a single [longitude, latitude] position.

    Args:
        position: Candidate position
        context: Human readable location used as message prefix

    Returns:
        Error message, or None if the position is valid
    """
    if not isinstance(position, (list, tuple)) or len(position) < 2:
        return f"{context} must be an array of at least 2 numbers [longitude, latitude]"

    lng, lat = position[0], position[1]

    if not is_finite_number(lng) or not is_finite_number(lat):
        return f"{context} must contain finite numbers"

    if not GeoJSONLimits.MIN_LONGITUDE <= lng <= GeoJSONLimits.MAX_LONGITUDE:
        return f"{context} longitude {lng} is out of range (-180 to 180)"

    if not GeoJSONLimits.MIN_LATITUDE <= lat <= GeoJSONLimits.MAX_LATITUDE:
        return f"{context} latitude {lat} is out of range (-90 to 90)"

    return None


def positions_equal(first: Sequence[Any], second: Sequence[Any]) -> bool:
    """
    Compare two positions on longitude and latitude.

    Args:
        first: First position
        second: Second position

    Returns:
        True if both coordinates match exactly
    """
    return first[0] == second[0] and first[1] == second[1]


def is_ring_closed(ring: Sequence[Sequence[Any]]) -> bool:
    """Check that the first and last positions of a ring coincide."""
    if not ring:
        return False
    return positions_equal(ring[0], ring[-1])


def close_ring(ring: Sequence[Sequence[Any]]) -> list[list[Any]]:
    """
    Return a copy of a ring whose last position repeats the first.

    Args:
        ring: List of positions

    Returns:
        Closed copy of the ring (empty rings stay empty)
    """
    closed = [list(position) for position in ring]
    if closed and not is_ring_closed(closed):
        closed.append(list(closed[0]))
    return closed


def vertex_mean(ring: Sequence[Sequence[Any]]) -> Optional[tuple[float, float]]:
    """
    Average longitude and latitude over every vertex of a ring.

    This is a plain vertex average, not an area-weighted centroid. The closing
    vertex is counted like any other.

    Args:
        ring: List of [longitude, latitude] positions

    Returns:
        (longitude, latitude) tuple, or None if the ring has no vertices
    """
    if not ring:
        return None

    points = np.array([[float(p[0]), float(p[1])] for p in ring], dtype=float)
    lng, lat = points.mean(axis=0)
    return (float(lng), float(lat))


def fold_bounds(rings: Iterable[Sequence[Sequence[Any]]]) -> tuple[float, float, float, float]:
    """
    Fold ring vertices into a (north, south, east, west) box.

    The fold is seeded at the opposite extremes, so an empty input yields an
    inverted box. Positions with fewer than two numbers are skipped.

    Args:
        rings: Iterable of rings

    Returns:
        Tuple of (north, south, east, west)
    """
    north = GeoJSONLimits.MIN_LATITUDE
    south = GeoJSONLimits.MAX_LATITUDE
    east = GeoJSONLimits.MIN_LONGITUDE
    west = GeoJSONLimits.MAX_LONGITUDE

    for ring in rings:
        usable = [
            (float(p[0]), float(p[1]))
            for p in ring
            if isinstance(p, (list, tuple)) and len(p) >= 2
            and is_finite_number(p[0]) and is_finite_number(p[1])
        ]
        if not usable:
            continue

        points = np.array(usable, dtype=float)
        north = max(north, float(points[:, 1].max()))
        south = min(south, float(points[:, 1].min()))
        east = max(east, float(points[:, 0].max()))
        west = min(west, float(points[:, 0].min()))

    return (north, south, east, west)
