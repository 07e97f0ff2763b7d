"""
Domain models for paddock and project data.

These models represent the core domain entities and should be independent
of any infrastructure concerns (HTTP handlers, storage, etc.).
"""
from datetime import datetime
from typing import Any, List, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Point(BaseModel):
    """GeoJSON Point."""
    type: Literal["Point"] = "Point"
    coordinates: List[float] = Field(
        description="[longitude, latitude]"
    )

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]


class PolygonGeometry(BaseModel):
    """GeoJSON Polygon. Ring 0 is the outer boundary, further rings are holes."""
    type: Literal["Polygon"] = "Polygon"
    coordinates: List[List[List[float]]]


class Bounds(BaseModel):
    """Axis-aligned lat/lon bounding box."""
    north: float
    south: float
    east: float
    west: float

    @property
    def is_empty(self) -> bool:
        return self.north < self.south or self.east < self.west


class Record(BaseModel):
    """
    A validated paddock derived from a single input Feature.

    Area and centroid fields are derived during normalization and never
    taken from the caller directly.
    """
    model_config = ConfigDict(frozen=True)

    uid: str = Field(
        default_factory=lambda: uuid4().hex,
        description="Storage key, unique per stored record"
    )
    id: str = Field(description="Paddock identifier from the input or synthesized")
    name: str
    owner: str
    project_name: str
    area_acres: float = Field(ge=0, description="Declared area in acres")
    area_hectares: float = Field(ge=0, description="Declared area converted to hectares")
    calculated_area_hectares: float = Field(
        ge=0, description="Geodesic area of the geometry in hectares"
    )
    centroid: Optional[Point] = Field(
        default=None,
        description="Unweighted mean of the outer ring vertices"
    )
    geometry: PolygonGeometry
    upload_batch: str
    uploaded_at: datetime
    is_valid: bool = True
    original_properties: dict[str, Any] = Field(default_factory=dict)


class FeatureError(BaseModel):
    """Validation messages for one rejected input feature."""
    model_config = ConfigDict(frozen=True)

    feature_index: int
    errors: List[str]


class BatchResult(BaseModel):
    """Outcome of ingesting one batch of features."""
    upload_batch: str
    total: int
    successful: int
    failed: int
    errors: List[FeatureError] = Field(default_factory=list)
    records: List[Record] = Field(default_factory=list)


class ProjectStats(BaseModel):
    """Per-project rollup recomputed from the live record set."""
    project_name: str
    description: Optional[str] = None
    total_records: int
    valid_records: int
    invalid_records: int
    total_area_acres: float
    total_area_hectares: float
    calculated_area_hectares: float
    average_record_size_hectares: float
    owners: set[str] = Field(default_factory=set)
    bounds: Bounds
    color: Optional[str] = None
    created_at: datetime
    last_updated: datetime


class GlobalStats(BaseModel):
    """Totals across all projects."""
    project_count: int
    total_records: int
    valid_records: int
    invalid_records: int
    total_area_acres: float
    total_area_hectares: float
    calculated_area_hectares: float
    average_project_size_hectares: float
    owners: set[str] = Field(default_factory=set)
    projects: List[str] = Field(default_factory=list)

    @property
    def owner_count(self) -> int:
        return len(self.owners)


class UploadBatchSummary(BaseModel):
    """History entry for one upload batch."""
    batch_id: str
    uploaded_at: datetime
    total_features: int
    valid_features: int
    invalid_features: int
    projects: List[str]
    owners: List[str]
