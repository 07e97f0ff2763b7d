"""
Dependency injection for FastAPI.
"""
from typing import Annotated
from fastapi import Depends

from paddock_api.infrastructure.paddock_repository import (
    PaddockRepository,
    get_repository,
)
from paddock_api.services.domain.ingestion_pipeline import IngestionPipeline
from paddock_api.services.application.paddock_service import PaddockService


def get_ingestion_pipeline() -> IngestionPipeline:
    """
    Dependency factory for IngestionPipeline.

    Returns:
        IngestionPipeline instance
    """
    return IngestionPipeline()


def get_paddock_service(
    repository: Annotated[PaddockRepository, Depends(get_repository)],
    pipeline: Annotated[IngestionPipeline, Depends(get_ingestion_pipeline)],
) -> PaddockService:
    """
    Dependency factory for PaddockService.

    Args:
        repository: Paddock store (injected)
        pipeline: Ingestion pipeline (injected)

    Returns:
        PaddockService instance
    """
    return PaddockService(repository=repository, pipeline=pipeline)


# Type aliases for cleaner route signatures
PaddockServiceDep = Annotated[PaddockService, Depends(get_paddock_service)]
