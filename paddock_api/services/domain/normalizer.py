"""
Domain service: Feature to paddock record normalization.
"""
from datetime import datetime, timezone
from typing import Any, Callable, Optional
import logging

from paddock_api.config import settings
from paddock_api.domain.constants import PaddockDefaults, PropertyKeys
from paddock_api.domain.models import PolygonGeometry, Record
from paddock_api.services.domain.geojson_validator import check_feature
from paddock_api.services.domain.geometry_engine import GeometryEngine
from paddock_api.utils.property_lookup import lookup_property, parse_number
from paddock_api.utils.spatial_helpers import close_ring

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _text(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


class PaddockNormalizer:
    """
    Maps loosely named feature properties onto canonical paddock records.

    Property precedence comes from PropertyKeys; derived fields (hectares,
    calculated area, centroid) are computed here and never copied from
    the caller, except an explicit area_hectares which is respected.
    """

    def __init__(
        self,
        geometry_engine: Optional[GeometryEngine] = None,
        calculated_area_source: Optional[str] = None,
        acres_to_hectares: Optional[float] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """
        Initialize the normalizer.

        Args:
            geometry_engine: Engine for area/centroid (defaults to a new one)
            calculated_area_source: "geometry" or "declared" (defaults to settings)
            acres_to_hectares: Conversion factor (defaults to settings)
            clock: Source of the upload timestamp
        """
        self.geometry_engine = geometry_engine or GeometryEngine()
        self.calculated_area_source = calculated_area_source or settings.calculated_area_source
        self.acres_to_hectares = acres_to_hectares or settings.acres_to_hectares
        self.clock = clock

    def normalize(self, feature: dict, upload_batch: str, index: int = 0) -> Record:
        """
        Build a paddock record from a feature.

        Args:
            feature: GeoJSON Feature mapping
            upload_batch: Opaque id of the ingestion call
            index: Position of the feature in its batch (used for synthetic ids)

        Returns:
            Record with derived fields populated

        Raises:
            ValueError: If the geometry cannot be represented as a Polygon
        """
        properties = feature.get("properties") or {}
        geometry = feature.get("geometry") or {}
        uploaded_at = self.clock()

        paddock_id = _text(lookup_property(properties, PropertyKeys.ID), "")
        if not paddock_id:
            timestamp = int(uploaded_at.timestamp() * 1000)
            paddock_id = PaddockDefaults.SYNTHETIC_ID_TEMPLATE.format(
                index=index, timestamp=timestamp
            )
            logger.debug(f"Feature {index} has no identifier, using {paddock_id}")

        area_acres = parse_number(lookup_property(properties, PropertyKeys.AREA_ACRES))
        area_acres = area_acres if area_acres is not None and area_acres >= 0 else 0.0

        area_hectares = parse_number(lookup_property(properties, PropertyKeys.AREA_HECTARES))
        if area_hectares is None or area_hectares < 0:
            area_hectares = area_acres * self.acres_to_hectares

        polygon = PolygonGeometry(
            coordinates=[close_ring(ring) for ring in geometry.get("coordinates") or []]
        )

        if self.calculated_area_source == "declared":
            calculated_area_hectares = area_hectares
        else:
            calculated_area_hectares = self.geometry_engine.compute_area(polygon)

        is_valid = not check_feature(feature) and self.geometry_engine.validate_geometry(geometry)

        return Record(
            id=paddock_id,
            name=_text(lookup_property(properties, PropertyKeys.NAME), PaddockDefaults.NAME),
            owner=_text(lookup_property(properties, PropertyKeys.OWNER), PaddockDefaults.OWNER),
            project_name=_text(
                lookup_property(properties, PropertyKeys.PROJECT), PaddockDefaults.PROJECT
            ),
            area_acres=area_acres,
            area_hectares=area_hectares,
            calculated_area_hectares=calculated_area_hectares,
            centroid=self.geometry_engine.compute_centroid(polygon),
            geometry=polygon,
            upload_batch=upload_batch,
            uploaded_at=uploaded_at,
            is_valid=is_valid,
            original_properties=dict(properties),
        )
