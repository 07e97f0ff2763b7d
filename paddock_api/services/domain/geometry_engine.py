"""
Domain service: Polygon validation and derived geometry values.

Area and centroid are best-effort derived quantities: they return 0 / None
for geometry they cannot measure and never raise.
"""
from typing import Any, Iterable, Optional
import logging

from pyproj.exceptions import GeodError

from paddock_api.config import settings
from paddock_api.domain.constants import GeoJSONLimits, SQUARE_METERS_PER_HECTARE
from paddock_api.domain.models import Bounds, Point, PolygonGeometry
from paddock_api.utils.geodesic import polygon_area_m2
from paddock_api.utils.spatial_helpers import (
    fold_bounds,
    is_ring_closed,
    position_error,
    vertex_mean,
)

logger = logging.getLogger(__name__)


def _as_mapping(geometry: Any) -> Any:
    if isinstance(geometry, PolygonGeometry):
        return geometry.model_dump()
    return geometry


def _outer_ring(geometry: Any) -> list:
    geometry = _as_mapping(geometry)
    if not isinstance(geometry, dict):
        return []
    coordinates = geometry.get("coordinates")
    if not isinstance(coordinates, list) or not coordinates:
        return []
    ring = coordinates[0]
    return ring if isinstance(ring, list) else []


class GeometryEngine:
    """
    Domain service for paddock polygon geometry.

    Validates ring structure and coordinate ranges, and derives geodesic
    area, vertex-mean centroid and bounding boxes.
    """

    def __init__(self, ellipsoid: Optional[str] = None):
        """
        Initialize the engine.

        Args:
            ellipsoid: Ellipsoid for geodesic area (defaults to settings)
        """
        self.ellipsoid = ellipsoid or settings.geodesic_ellipsoid

    def geometry_errors(self, geometry: Any) -> list[str]:
        """
        Describe why a geometry is not a usable paddock polygon.

        Checks:
        - geometry is a Polygon with a coordinates array
        - outer ring has at least 4 positions and is closed
        - every position in every ring is a finite, in-range [lon, lat]

        Args:
            geometry: GeoJSON geometry mapping or PolygonGeometry

        Returns:
            List of error messages (empty if valid)
        """
        geometry = _as_mapping(geometry)

        if not isinstance(geometry, dict):
            return ["Geometry must be an object"]

        if geometry.get("type") != "Polygon":
            return ["Geometry must be a Polygon"]

        rings = geometry.get("coordinates")
        if not isinstance(rings, list) or not rings:
            return ["Polygon coordinates must be a non-empty array"]

        errors = []
        for ring_index, ring in enumerate(rings):
            if not isinstance(ring, list):
                errors.append(f"Polygon ring {ring_index + 1} must be an array")
                continue

            for position_index, position in enumerate(ring):
                message = position_error(
                    position,
                    f"Polygon ring {ring_index + 1} position {position_index + 1}",
                )
                if message:
                    errors.append(message)

        outer = rings[0]
        if isinstance(outer, list):
            if len(outer) < GeoJSONLimits.MIN_RING_POSITIONS:
                errors.append(
                    f"Polygon outer ring must have at least "
                    f"{GeoJSONLimits.MIN_RING_POSITIONS} positions"
                )
            elif not errors and not is_ring_closed(outer):
                errors.append(
                    "Polygon outer ring must be closed (first and last positions must be the same)"
                )

        return errors

    def validate_geometry(self, geometry: Any) -> bool:
        """
        Check whether a geometry is a valid paddock polygon.

        Args:
            geometry: GeoJSON geometry mapping or PolygonGeometry

        Returns:
            True if valid
        """
        return not self.geometry_errors(geometry)

    def compute_area(self, geometry: Any) -> float:
        """
        Compute the geodesic area of a polygon in hectares.

        Args:
            geometry: GeoJSON geometry mapping or PolygonGeometry

        Returns:
            Area in hectares (0.0 for invalid or degenerate geometry)
        """
        if not self.validate_geometry(geometry):
            return 0.0

        rings = _as_mapping(geometry)["coordinates"]
        try:
            area_m2 = polygon_area_m2(rings, self.ellipsoid)
        except (GeodError, ValueError) as e:
            logger.warning(f"Geodesic area calculation failed, using 0: {e}")
            return 0.0

        return area_m2 / SQUARE_METERS_PER_HECTARE

    def compute_centroid(self, geometry: Any) -> Optional[Point]:
        """
        Compute the unweighted mean of the outer ring vertices.

        This is not an area-weighted centroid; consumers rely on the
        vertex-average values.

        Args:
            geometry: GeoJSON geometry mapping or PolygonGeometry

        Returns:
            Point, or None if the outer ring has no usable coordinates
        """
        ring = _outer_ring(geometry)
        try:
            mean = vertex_mean(ring)
        except (TypeError, ValueError, IndexError, OverflowError):
            logger.debug("Outer ring has malformed positions, centroid left unset")
            return None

        if mean is None:
            return None
        return Point(coordinates=[mean[0], mean[1]])

    def compute_bounds(self, geometries: Iterable[Any]) -> Bounds:
        """
        Compute the bounding box of the outer rings of several geometries.

        Args:
            geometries: GeoJSON geometry mappings or PolygonGeometry objects

        Returns:
            Bounds (inverted when there are no vertices)
        """
        north, south, east, west = fold_bounds(
            _outer_ring(geometry) for geometry in geometries
        )
        return Bounds(north=north, south=south, east=east, west=west)
