"""
API request and response models using Pydantic.
"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

from paddock_api.domain.models import (
    Bounds,
    GlobalStats,
    PolygonGeometry,
    ProjectStats,
    Record,
    UploadBatchSummary,
)


class FeatureErrorResponse(BaseModel):
    """Validation messages for one rejected feature."""
    feature_index: int = Field(
        description="Zero-based position of the feature in the upload"
    )
    errors: List[str] = Field(
        description="Field and geometry problems found in the feature"
    )


class UploadResults(BaseModel):
    """Per-feature accounting for an upload."""
    total: int
    successful: int
    failed: int
    errors: List[FeatureErrorResponse]


class UploadResponse(BaseModel):
    """Response model for upload endpoints."""
    upload_batch: str = Field(
        description="Identifier shared by every paddock stored from this upload"
    )
    results: UploadResults
    projects_updated: int = Field(
        description="Number of projects touched by this upload"
    )
    projects: List[str]
    message: str

    class Config:
        json_schema_extra = {
            "example": {
                "upload_batch": "1b9d6bcd-bbfd-4b2d-9b5d-ab8dfbbd4bed",
                "results": {
                    "total": 2,
                    "successful": 1,
                    "failed": 1,
                    "errors": [
                        {"feature_index": 1, "errors": ["Feature must have owner property"]}
                    ],
                },
                "projects_updated": 1,
                "projects": ["North Farm"],
                "message": "Successfully processed 1 of 2 features",
            }
        }


class PaddockFeature(BaseModel):
    """A stored paddock exported as a GeoJSON Feature."""
    type: Literal["Feature"] = "Feature"
    properties: Dict[str, Any]
    geometry: PolygonGeometry

    @classmethod
    def from_record(cls, record: Record) -> "PaddockFeature":
        return cls(
            properties={
                "id": record.id,
                "name": record.name,
                "owner": record.owner,
                "Project__Name": record.project_name,
                "area_acres": record.area_acres,
                "area_hectares": record.area_hectares,
                "calculated_area_hectares": record.calculated_area_hectares,
                "uploaded_at": record.uploaded_at.isoformat(),
                "is_valid": record.is_valid,
                "uid": record.uid,
            },
            geometry=record.geometry,
        )


class Pagination(BaseModel):
    """Pagination details for list endpoints."""
    total: int
    limit: int
    offset: int
    has_more: bool


class PaddockCollectionResponse(BaseModel):
    """Paddocks as a GeoJSON FeatureCollection with pagination."""
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[PaddockFeature]
    pagination: Pagination


class PaddockSummary(BaseModel):
    """Compact paddock listing used in project details."""
    uid: str
    id: str
    name: str
    owner: str
    area_acres: float
    area_hectares: float
    calculated_area_hectares: float
    is_valid: bool
    uploaded_at: datetime


class ProjectResponse(BaseModel):
    """Project statistics."""
    name: str
    description: Optional[str] = None
    total_paddocks: int
    valid_paddocks: int
    invalid_paddocks: int
    total_area_acres: float
    total_area_hectares: float
    calculated_area_hectares: float
    average_paddock_size: float = Field(
        description="Declared hectares per valid paddock"
    )
    owners: List[str]
    bounds: Bounds
    color: Optional[str] = None
    created_at: datetime
    last_updated: datetime

    @classmethod
    def from_stats(cls, stats: ProjectStats) -> "ProjectResponse":
        return cls(
            name=stats.project_name,
            description=stats.description,
            total_paddocks=stats.total_records,
            valid_paddocks=stats.valid_records,
            invalid_paddocks=stats.invalid_records,
            total_area_acres=stats.total_area_acres,
            total_area_hectares=stats.total_area_hectares,
            calculated_area_hectares=stats.calculated_area_hectares,
            average_paddock_size=stats.average_record_size_hectares,
            owners=sorted(stats.owners),
            bounds=stats.bounds,
            color=stats.color,
            created_at=stats.created_at,
            last_updated=stats.last_updated,
        )


class ProjectDetailResponse(ProjectResponse):
    """Project statistics with the project's paddocks."""
    paddocks: List[PaddockSummary]


class ProjectUpdateRequest(BaseModel):
    """Editable project details."""
    description: Optional[str] = Field(default=None, max_length=2000)
    color: Optional[str] = Field(
        default=None,
        pattern=r"^#[0-9A-Fa-f]{6}$",
        description="Hex color such as #10B981",
    )


class RefreshStatsResponse(BaseModel):
    """Response model for the statistics refresh endpoint."""
    projects: List[ProjectResponse]
    message: str


class DeleteResponse(BaseModel):
    """Response model for delete endpoints."""
    message: str
    deleted_paddocks: int


class SummaryResponse(BaseModel):
    """Totals across all projects."""
    project_count: int
    total_paddocks: int
    valid_paddocks: int
    invalid_paddocks: int
    total_area_acres: float
    total_area_hectares: float
    calculated_area_hectares: float
    average_project_size: float
    owner_count: int
    owners: List[str]
    projects: List[str]

    @classmethod
    def from_stats(cls, stats: GlobalStats) -> "SummaryResponse":
        return cls(
            project_count=stats.project_count,
            total_paddocks=stats.total_records,
            valid_paddocks=stats.valid_records,
            invalid_paddocks=stats.invalid_records,
            total_area_acres=stats.total_area_acres,
            total_area_hectares=stats.total_area_hectares,
            calculated_area_hectares=stats.calculated_area_hectares,
            average_project_size=stats.average_project_size_hectares,
            owner_count=stats.owner_count,
            owners=sorted(stats.owners),
            projects=stats.projects,
        )


class BatchHistoryResponse(BaseModel):
    """Upload batch history, newest first."""
    batches: List[UploadBatchSummary]
