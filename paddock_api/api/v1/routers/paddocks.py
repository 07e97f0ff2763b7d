"""
API router for paddock endpoints.
"""
from typing import Annotated, Optional
from fastapi import APIRouter, HTTPException, Path, Query

from paddock_api.api.dependencies import PaddockServiceDep
from paddock_api.api.v1.models.responses import (
    DeleteResponse,
    PaddockCollectionResponse,
    PaddockFeature,
    Pagination,
    SummaryResponse,
)
from paddock_api.domain.exceptions import PaddockNotFoundError


router = APIRouter(
    prefix="/paddocks",
    tags=["paddocks"],
)

LimitQuery = Annotated[int, Query(ge=1, le=1000, description="Page size")]
OffsetQuery = Annotated[int, Query(ge=0, description="Number of paddocks to skip")]


def _collection(records, total: int, limit: int, offset: int) -> PaddockCollectionResponse:
    return PaddockCollectionResponse(
        features=[PaddockFeature.from_record(record) for record in records],
        pagination=Pagination(
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + limit < total,
        ),
    )


@router.get(
    "",
    response_model=PaddockCollectionResponse,
    summary="List paddocks",
)
async def list_paddocks(
    paddock_service: PaddockServiceDep,
    project: Annotated[Optional[str], Query(description="Exact project name")] = None,
    owner: Annotated[Optional[str], Query(description="Exact owner name")] = None,
    valid: Annotated[Optional[bool], Query(description="Filter by validity")] = None,
    limit: LimitQuery = 100,
    offset: OffsetQuery = 0,
    sort: Annotated[str, Query(description="Sort field, '-' prefix for descending")] = "-uploadedAt",
) -> PaddockCollectionResponse:
    """
    List stored paddocks as a GeoJSON FeatureCollection.

    Raises:
        HTTPException: If the sort field is not supported
    """
    try:
        records, total = paddock_service.list_paddocks(
            project=project, owner=owner, valid=valid,
            sort=sort, limit=limit, offset=offset,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _collection(records, total, limit, offset)


@router.get(
    "/stats/summary",
    response_model=SummaryResponse,
    summary="Get overall paddock statistics",
)
async def paddock_summary(paddock_service: PaddockServiceDep) -> SummaryResponse:
    """Totals across every stored paddock."""
    return SummaryResponse.from_stats(paddock_service.paddock_summary())


@router.get(
    "/project/{project_name}",
    response_model=PaddockCollectionResponse,
    summary="List paddocks of a project",
)
async def list_project_paddocks(
    project_name: Annotated[str, Path(description="Exact project name")],
    paddock_service: PaddockServiceDep,
    limit: LimitQuery = 100,
    offset: OffsetQuery = 0,
) -> PaddockCollectionResponse:
    """List one project's paddocks, newest first."""
    records, total = paddock_service.list_paddocks(
        project=project_name, limit=limit, offset=offset
    )
    return _collection(records, total, limit, offset)


@router.get(
    "/{uid}",
    response_model=PaddockFeature,
    summary="Get a paddock",
    responses={404: {"description": "Paddock not found"}},
)
async def get_paddock(
    uid: Annotated[str, Path(description="Storage key of the paddock")],
    paddock_service: PaddockServiceDep,
) -> PaddockFeature:
    """
    Get one paddock as a GeoJSON Feature.

    Raises:
        HTTPException: If the paddock does not exist
    """
    try:
        record = paddock_service.get_paddock(uid)
    except PaddockNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return PaddockFeature.from_record(record)


@router.delete(
    "/{uid}",
    response_model=DeleteResponse,
    summary="Delete a paddock",
    responses={404: {"description": "Paddock not found"}},
)
async def delete_paddock(
    uid: Annotated[str, Path(description="Storage key of the paddock")],
    paddock_service: PaddockServiceDep,
) -> DeleteResponse:
    """
    Delete one paddock and recompute its project's statistics.

    Raises:
        HTTPException: If the paddock does not exist
    """
    try:
        await paddock_service.delete_paddock(uid)
    except PaddockNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return DeleteResponse(message="Paddock deleted successfully", deleted_paddocks=1)
