"""
API router for GeoJSON upload endpoints.
"""
from typing import Annotated, Any, Optional
from fastapi import APIRouter, Body, HTTPException, Query, Request

from paddock_api.api.dependencies import PaddockServiceDep
from paddock_api.api.v1.models.responses import (
    BatchHistoryResponse,
    FeatureErrorResponse,
    UploadResponse,
    UploadResults,
)
from paddock_api.config import settings
from paddock_api.domain.exceptions import GeoJSONStructureError, InvalidJSONError
from paddock_api.services.application.paddock_service import PaddockService, UploadOutcome


router = APIRouter(
    prefix="/upload",
    tags=["upload"],
)

_UPLOAD_RESPONSES = {
    400: {
        "description": "Invalid JSON or invalid GeoJSON structure",
    },
}


def _structure_error(e: GeoJSONStructureError) -> HTTPException:
    error = "Invalid JSON format" if isinstance(e, InvalidJSONError) else "Invalid GeoJSON format"
    return HTTPException(
        status_code=400,
        detail={"error": error, "code": e.error_code, "message": str(e)},
    )


def _to_response(outcome: UploadOutcome) -> UploadResponse:
    batch = outcome.batch
    return UploadResponse(
        upload_batch=batch.upload_batch,
        results=UploadResults(
            total=batch.total,
            successful=batch.successful,
            failed=batch.failed,
            errors=[
                FeatureErrorResponse(feature_index=e.feature_index, errors=e.errors)
                for e in batch.errors
            ],
        ),
        projects_updated=len(outcome.projects_updated),
        projects=outcome.projects_updated,
        message=f"Successfully processed {batch.successful} of {batch.total} features",
    )


async def _ingest(paddock_service: PaddockService, raw: Any) -> UploadResponse:
    try:
        outcome = await paddock_service.upload(raw)
    except GeoJSONStructureError as e:
        raise _structure_error(e)
    return _to_response(outcome)


@router.post(
    "/geojson",
    response_model=UploadResponse,
    summary="Upload a GeoJSON document",
    description="""
    Upload a raw GeoJSON Feature or FeatureCollection as the request body.

    Each feature is validated independently: rejected features are reported
    with their index and messages while the rest of the upload is stored.
    Structural problems (invalid JSON, wrong type, empty or oversized
    feature list) reject the whole upload.
    """,
    responses={
        **_UPLOAD_RESPONSES,
        413: {"description": "Upload body is too large"},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/geo+json": {"schema": {"type": "object"}},
                "application/json": {"schema": {"type": "object"}},
            },
        }
    },
)
async def upload_geojson(
    request: Request,
    paddock_service: PaddockServiceDep,
) -> UploadResponse:
    """
    Ingest a raw GeoJSON upload body.

    Args:
        request: Incoming request carrying the GeoJSON bytes
        paddock_service: Paddock service (injected dependency)

    Returns:
        UploadResponse with per-feature accounting

    Raises:
        HTTPException: If the body is missing, too large or structurally invalid
    """
    body = await request.body()

    if not body:
        raise HTTPException(status_code=400, detail="No data provided")

    if len(body) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Upload exceeds the maximum size of {settings.max_upload_bytes} bytes",
        )

    return await _ingest(paddock_service, body)


@router.post(
    "/json",
    response_model=UploadResponse,
    summary="Upload GeoJSON as a JSON body",
    responses=_UPLOAD_RESPONSES,
)
async def upload_json(
    payload: Annotated[Any, Body(description="GeoJSON Feature or FeatureCollection")],
    paddock_service: PaddockServiceDep,
) -> UploadResponse:
    """
    Ingest GeoJSON already parsed from a JSON request body.

    Args:
        payload: Parsed GeoJSON
        paddock_service: Paddock service (injected dependency)

    Returns:
        UploadResponse with per-feature accounting
    """
    return await _ingest(paddock_service, payload)


@router.get(
    "/batches",
    response_model=BatchHistoryResponse,
    summary="List upload batches",
)
async def list_batches(
    paddock_service: PaddockServiceDep,
    limit: Annotated[Optional[int], Query(ge=1, le=500)] = None,
) -> BatchHistoryResponse:
    """
    Get the upload history, newest batch first.

    Args:
        paddock_service: Paddock service (injected dependency)
        limit: Maximum number of batches

    Returns:
        BatchHistoryResponse
    """
    return BatchHistoryResponse(batches=paddock_service.list_upload_batches(limit))
