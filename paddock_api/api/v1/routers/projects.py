"""
API router for project endpoints.
"""
from typing import Annotated, List
from fastapi import APIRouter, HTTPException, Path

from paddock_api.api.dependencies import PaddockServiceDep
from paddock_api.api.v1.models.responses import (
    DeleteResponse,
    PaddockSummary,
    ProjectDetailResponse,
    ProjectResponse,
    ProjectUpdateRequest,
    RefreshStatsResponse,
    SummaryResponse,
)
from paddock_api.domain.exceptions import ProjectNotFoundError


router = APIRouter(
    prefix="/projects",
    tags=["projects"],
)

ProjectNamePath = Annotated[str, Path(description="Exact project name")]

_NOT_FOUND = {404: {"description": "Project not found"}}


@router.get(
    "",
    response_model=List[ProjectResponse],
    summary="List projects with statistics",
)
async def list_projects(paddock_service: PaddockServiceDep) -> List[ProjectResponse]:
    """All projects in creation order."""
    return [ProjectResponse.from_stats(p) for p in paddock_service.list_projects()]


@router.get(
    "/stats/summary",
    response_model=SummaryResponse,
    summary="Get project summary statistics",
)
async def project_summary(paddock_service: PaddockServiceDep) -> SummaryResponse:
    """Totals folded from the per-project statistics."""
    return SummaryResponse.from_stats(paddock_service.project_summary())


@router.post(
    "/refresh-stats",
    response_model=RefreshStatsResponse,
    summary="Recompute all project statistics",
)
async def refresh_stats(paddock_service: PaddockServiceDep) -> RefreshStatsResponse:
    """Recompute every project from the stored paddocks and reassign colors."""
    projects = await paddock_service.refresh_stats()
    return RefreshStatsResponse(
        projects=[ProjectResponse.from_stats(p) for p in projects],
        message=f"Updated statistics for {len(projects)} projects",
    )


@router.get(
    "/{project_name}",
    response_model=ProjectDetailResponse,
    summary="Get a project with its paddocks",
    responses=_NOT_FOUND,
)
async def get_project(
    project_name: ProjectNamePath,
    paddock_service: PaddockServiceDep,
) -> ProjectDetailResponse:
    """
    Get one project's statistics and paddocks.

    Raises:
        HTTPException: If the project does not exist
    """
    try:
        stats, records = paddock_service.get_project(project_name)
    except ProjectNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return ProjectDetailResponse(
        **ProjectResponse.from_stats(stats).model_dump(),
        paddocks=[PaddockSummary.model_validate(r.model_dump()) for r in records],
    )


@router.put(
    "/{project_name}",
    response_model=ProjectResponse,
    summary="Update project details",
    responses=_NOT_FOUND,
)
async def update_project(
    project_name: ProjectNamePath,
    update: ProjectUpdateRequest,
    paddock_service: PaddockServiceDep,
) -> ProjectResponse:
    """
    Update a project's description and/or color.

    Raises:
        HTTPException: If the project does not exist
    """
    try:
        stats = await paddock_service.update_project(
            project_name, description=update.description, color=update.color
        )
    except ProjectNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return ProjectResponse.from_stats(stats)


@router.delete(
    "/{project_name}",
    response_model=DeleteResponse,
    summary="Delete a project and its paddocks",
    responses=_NOT_FOUND,
)
async def delete_project(
    project_name: ProjectNamePath,
    paddock_service: PaddockServiceDep,
) -> DeleteResponse:
    """
    Delete a project together with all of its paddocks.

    Raises:
        HTTPException: If the project does not exist
    """
    try:
        deleted = await paddock_service.delete_project(project_name)
    except ProjectNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return DeleteResponse(
        message=f"Project '{project_name}' and {deleted} paddocks deleted successfully",
        deleted_paddocks=deleted,
    )
