"""
Domain service: GeoJSON ingestion pipeline.

Runs raw upload content through structure validation, per-feature field and
geometry checks, and normalization. A batch survives individual feature
failures; only structural problems abort it.
"""
from typing import Any, Optional, Sequence
import logging

from paddock_api.domain.models import BatchResult, FeatureError, ProjectStats, Record
from paddock_api.services.domain.aggregator import ProjectAggregator, assign_colors
from paddock_api.services.domain.geojson_validator import (
    check_feature,
    parse_geojson,
    validate_structure,
)
from paddock_api.services.domain.geometry_engine import GeometryEngine
from paddock_api.services.domain.normalizer import PaddockNormalizer

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """
    Entry points used by the HTTP layer.

    - ingest: validate and normalize one upload batch
    - recompute_project_stats: rebuild project rollups from records
    - assign_colors: give palette colors to uncustomized projects
    """

    def __init__(
        self,
        geometry_engine: Optional[GeometryEngine] = None,
        normalizer: Optional[PaddockNormalizer] = None,
        aggregator: Optional[ProjectAggregator] = None,
    ):
        """
        Initialize the pipeline with its domain services.

        Args:
            geometry_engine: Shared geometry engine
            normalizer: Feature normalizer
            aggregator: Project aggregator
        """
        self.geometry_engine = geometry_engine or GeometryEngine()
        self.normalizer = normalizer or PaddockNormalizer(geometry_engine=self.geometry_engine)
        self.aggregator = aggregator or ProjectAggregator(geometry_engine=self.geometry_engine)

    def ingest(self, raw: Any, upload_batch: str) -> BatchResult:
        """
        Validate and normalize every feature of an upload.

        Args:
            raw: JSON bytes/str or an already parsed GeoJSON object
            upload_batch: Opaque id of this ingestion call

        Returns:
            BatchResult with records for accepted features and errors for
            rejected ones (sorted by feature index)

        Raises:
            GeoJSONStructureError: If the upload is not a usable
                Feature/FeatureCollection (no records are produced)
        """
        collection = validate_structure(parse_geojson(raw))
        features = collection["features"]

        logger.info(f"Ingesting batch {upload_batch} with {len(features)} features")

        records: list[Record] = []
        errors: list[FeatureError] = []

        for index, feature in enumerate(features):
            messages = self._check(feature)
            if messages:
                logger.warning(f"Feature {index} rejected: {'; '.join(messages)}")
                errors.append(FeatureError(feature_index=index, errors=messages))
                continue

            records.append(self.normalizer.normalize(feature, upload_batch, index=index))

        errors.sort(key=lambda error: error.feature_index)

        result = BatchResult(
            upload_batch=upload_batch,
            total=len(features),
            successful=len(records),
            failed=len(errors),
            errors=errors,
            records=records,
        )
        logger.info(
            f"Batch {upload_batch}: {result.successful} of {result.total} features accepted"
        )
        return result

    def _check(self, feature: Any) -> list[str]:
        """
        Run field checks, then geometry checks once the fields are usable.

        Args:
            feature: Raw feature

        Returns:
            Error messages (empty if the feature can be normalized)
        """
        messages = check_feature(feature)
        if messages:
            return messages
        return self.geometry_engine.geometry_errors(feature["geometry"])

    def recompute_project_stats(
        self,
        records: Sequence[Record],
        previous: Optional[Sequence[ProjectStats]] = None,
    ) -> list[ProjectStats]:
        """
        Rebuild statistics for every project in a record set.

        Args:
            records: Current record set
            previous: Earlier statistics holding project metadata

        Returns:
            List of ProjectStats
        """
        return self.aggregator.aggregate(records, previous=previous)

    def assign_colors(self, projects: Sequence[ProjectStats]) -> list[ProjectStats]:
        """
        Give palette colors to projects that have no custom color.

        Args:
            projects: Project statistics

        Returns:
            List of ProjectStats with colors assigned
        """
        return assign_colors(projects)
