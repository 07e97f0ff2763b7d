"""
Application service: Orchestration layer for paddock and project operations.
"""
import asyncio
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Optional
from uuid import uuid4
import logging

from paddock_api.config import settings
from paddock_api.domain.exceptions import PaddockNotFoundError, ProjectNotFoundError
from paddock_api.domain.models import (
    BatchResult,
    GlobalStats,
    ProjectStats,
    Record,
    UploadBatchSummary,
)
from paddock_api.infrastructure.paddock_repository import PaddockRepository
from paddock_api.services.domain.ingestion_pipeline import IngestionPipeline

logger = logging.getLogger(__name__)

# Serializes stats recomputation and color assignment across requests
_stats_lock = asyncio.Lock()


@dataclass
class UploadOutcome:
    """Result of storing one upload batch."""
    batch: BatchResult
    projects_updated: list[str] = field(default_factory=list)


class PaddockService:
    """
    Application service for paddock-related operations.

    Coordinates the ingestion pipeline and the repository. Every change to
    the record set is followed by a full statistics recompute and color pass
    inside one lock, and the project snapshot is swapped as a whole.
    """

    def __init__(
        self,
        repository: PaddockRepository,
        pipeline: IngestionPipeline,
        stats_lock: Optional[asyncio.Lock] = None,
    ):
        """
        Initialize the service with dependencies.

        Args:
            repository: Paddock and project store
            pipeline: GeoJSON ingestion pipeline
            stats_lock: Lock guarding the statistics snapshot
        """
        self.repository = repository
        self.pipeline = pipeline
        self.stats_lock = stats_lock or _stats_lock

    async def upload(self, raw: Any) -> UploadOutcome:
        """
        Ingest an upload and store its accepted paddocks.

        This method orchestrates:
        1. Generating an upload batch id
        2. Validating and normalizing the features
        3. Storing accepted records
        4. Recomputing project statistics and colors

        Args:
            raw: JSON bytes/str or parsed GeoJSON

        Returns:
            UploadOutcome with the batch result and touched project names

        Raises:
            GeoJSONStructureError: If the upload is structurally invalid
        """
        upload_batch = str(uuid4())
        batch = self.pipeline.ingest(raw, upload_batch)

        async with self.stats_lock:
            self.repository.add_records(batch.records)
            self._refresh_locked()

        projects_updated = sorted({record.project_name for record in batch.records})
        return UploadOutcome(batch=batch, projects_updated=projects_updated)

    async def refresh_stats(self) -> list[ProjectStats]:
        """
        Recompute statistics for all projects.

        Returns:
            Updated project statistics
        """
        async with self.stats_lock:
            return self._refresh_locked()

    def _refresh_locked(self) -> list[ProjectStats]:
        records = self.repository.all_records()
        projects = self.pipeline.recompute_project_stats(
            records, previous=self.repository.get_projects()
        )
        projects = self.pipeline.assign_colors(projects)
        self.repository.replace_projects(projects)
        logger.debug(f"Recomputed statistics for {len(projects)} projects")
        return projects

    # Paddocks

    def list_paddocks(
        self,
        project: Optional[str] = None,
        owner: Optional[str] = None,
        valid: Optional[bool] = None,
        sort: str = "-uploadedAt",
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> tuple[list[Record], int]:
        """
        List stored paddocks.

        Returns:
            Tuple of (page of records, total matching count)

        Raises:
            ValueError: If the sort field is not supported
        """
        return self.repository.find_records(
            project=project, owner=owner, valid=valid,
            sort=sort, limit=limit, offset=offset,
        )

    def get_paddock(self, uid: str) -> Record:
        record = self.repository.get_record(uid)
        if record is None:
            raise PaddockNotFoundError(f"Paddock '{uid}' not found")
        return record

    async def delete_paddock(self, uid: str) -> Record:
        """
        Delete one paddock and recompute statistics.

        A project whose last paddock is deleted disappears.

        Args:
            uid: Storage key of the paddock

        Returns:
            The deleted record

        Raises:
            PaddockNotFoundError: If no paddock has this key
        """
        async with self.stats_lock:
            record = self.repository.delete_record(uid)
            if record is None:
                raise PaddockNotFoundError(f"Paddock '{uid}' not found")
            self._refresh_locked()
        return record

    def paddock_summary(self) -> GlobalStats:
        return self.pipeline.aggregator.summarize(self.repository.all_records())

    def list_upload_batches(self, limit: Optional[int] = None) -> list[UploadBatchSummary]:
        """
        Summarize stored paddocks per upload batch, newest first.

        Args:
            limit: Maximum number of batches (defaults to settings)

        Returns:
            List of UploadBatchSummary
        """
        limit = limit or settings.batch_history_limit

        batches: dict[str, list[Record]] = defaultdict(list)
        for record in self.repository.all_records():
            batches[record.upload_batch].append(record)

        summaries = []
        for batch_id, records in batches.items():
            valid = sum(1 for record in records if record.is_valid)
            summaries.append(UploadBatchSummary(
                batch_id=batch_id,
                uploaded_at=min(record.uploaded_at for record in records),
                total_features=len(records),
                valid_features=valid,
                invalid_features=len(records) - valid,
                projects=sorted({record.project_name for record in records}),
                owners=sorted({record.owner for record in records}),
            ))

        summaries.sort(key=lambda s: s.uploaded_at, reverse=True)
        return summaries[:limit]

    # Projects

    def list_projects(self) -> list[ProjectStats]:
        return self.repository.get_projects()

    def get_project(self, project_name: str) -> tuple[ProjectStats, list[Record]]:
        """
        Get a project's statistics and its paddocks.

        Raises:
            ProjectNotFoundError: If the project has no paddocks
        """
        project = self.repository.get_project(project_name)
        if project is None:
            raise ProjectNotFoundError(f"Project '{project_name}' not found")

        records, _ = self.repository.find_records(project=project_name)
        return project, records

    async def update_project(
        self,
        project_name: str,
        description: Optional[str] = None,
        color: Optional[str] = None,
    ) -> ProjectStats:
        """
        Update a project's description and/or color.

        A color set here counts as customized and survives later color passes.

        Raises:
            ProjectNotFoundError: If the project has no paddocks
        """
        async with self.stats_lock:
            updated = self.repository.update_project(
                project_name, description=description, color=color
            )

        if updated is None:
            raise ProjectNotFoundError(f"Project '{project_name}' not found")

        logger.info(f"Updated project '{project_name}'")
        return updated

    async def delete_project(self, project_name: str) -> int:
        """
        Delete a project and all its paddocks.

        Returns:
            Number of paddocks deleted

        Raises:
            ProjectNotFoundError: If the project does not exist
        """
        async with self.stats_lock:
            if self.repository.get_project(project_name) is None:
                raise ProjectNotFoundError(f"Project '{project_name}' not found")

            deleted = self.repository.delete_project_records(project_name)
            self._refresh_locked()

        logger.info(f"Deleted project '{project_name}' and {deleted} paddocks")
        return deleted

    def project_summary(self) -> GlobalStats:
        return self.pipeline.aggregator.summarize_projects(self.repository.get_projects())
