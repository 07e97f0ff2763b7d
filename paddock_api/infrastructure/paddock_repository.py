"""
Infrastructure layer: In-memory paddock and project store.
"""
from typing import Iterable, Optional, Sequence

from paddock_api.domain.models import ProjectStats, Record


# Sortable record fields exposed to the API
SORTABLE_FIELDS = {
    "uploadedAt": "uploaded_at",
    "uploaded_at": "uploaded_at",
    "name": "name",
    "owner": "owner",
    "projectName": "project_name",
    "project_name": "project_name",
    "areaAcres": "area_acres",
    "area_acres": "area_acres",
    "areaHectares": "area_hectares",
    "area_hectares": "area_hectares",
    "calculatedAreaHectares": "calculated_area_hectares",
    "calculated_area_hectares": "calculated_area_hectares",
}


class PaddockRepository:
    """
    Document store for paddock records and the project statistics snapshot.

    Records are keyed by their storage uid. The project snapshot is replaced
    as a whole so readers never observe a half-updated set of projects.
    """

    def __init__(self):
        """Initialize empty collections."""
        self._records: dict[str, Record] = {}
        self._projects: tuple[ProjectStats, ...] = ()

    # Records

    def add_records(self, records: Iterable[Record]) -> int:
        """
        Store new records.

        Args:
            records: Records to insert

        Returns:
            Number of records stored
        """
        count = 0
        for record in records:
            self._records[record.uid] = record
            count += 1
        return count

    def get_record(self, uid: str) -> Optional[Record]:
        return self._records.get(uid)

    def all_records(self) -> list[Record]:
        return list(self._records.values())

    def find_records(
        self,
        project: Optional[str] = None,
        owner: Optional[str] = None,
        valid: Optional[bool] = None,
        sort: str = "-uploadedAt",
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> tuple[list[Record], int]:
        """
        Query records with filters and pagination.

        Args:
            project: Exact project name filter
            owner: Exact owner filter
            valid: Validity filter
            sort: Field name, prefixed with '-' for descending order
            limit: Maximum number of records to return
            offset: Number of matching records to skip

        Returns:
            Tuple of (page of records, total matching count)

        Raises:
            ValueError: If the sort field is not supported
        """
        descending = sort.startswith("-")
        field = SORTABLE_FIELDS.get(sort.lstrip("-+"))
        if field is None:
            raise ValueError(f"Unsupported sort field: {sort}")

        matches = [
            record for record in self._records.values()
            if (project is None or record.project_name == project)
            and (owner is None or record.owner == owner)
            and (valid is None or record.is_valid == valid)
        ]
        matches.sort(key=lambda record: getattr(record, field), reverse=descending)

        end = None if limit is None else offset + limit
        return matches[offset:end], len(matches)

    def delete_record(self, uid: str) -> Optional[Record]:
        return self._records.pop(uid, None)

    def delete_project_records(self, project_name: str) -> int:
        """
        Delete every record of a project.

        Args:
            project_name: Exact project name

        Returns:
            Number of records deleted
        """
        doomed = [uid for uid, r in self._records.items() if r.project_name == project_name]
        for uid in doomed:
            del self._records[uid]
        return len(doomed)

    # Projects

    def get_projects(self) -> list[ProjectStats]:
        return list(self._projects)

    def get_project(self, project_name: str) -> Optional[ProjectStats]:
        for project in self._projects:
            if project.project_name == project_name:
                return project
        return None

    def replace_projects(self, projects: Sequence[ProjectStats]) -> None:
        """Swap in a complete new project snapshot."""
        self._projects = tuple(projects)

    def update_project(
        self,
        project_name: str,
        description: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Optional[ProjectStats]:
        """
        Update a project's editable metadata in the snapshot.

        Args:
            project_name: Exact project name
            description: New description (unchanged if None)
            color: New color (unchanged if None)

        Returns:
            The updated project, or None if it does not exist
        """
        changes = {}
        if description is not None:
            changes["description"] = description
        if color is not None:
            changes["color"] = color

        projects = list(self._projects)
        for position, project in enumerate(projects):
            if project.project_name == project_name:
                projects[position] = project.model_copy(update=changes)
                self._projects = tuple(projects)
                return projects[position]
        return None

    def clear(self) -> None:
        """Remove all records and projects."""
        self._records = {}
        self._projects = ()


# Singleton instance
_repository: Optional[PaddockRepository] = None


def get_repository() -> PaddockRepository:
    """
    Get or create the singleton repository instance.

    Returns:
        PaddockRepository instance
    """
    global _repository
    if _repository is None:
        _repository = PaddockRepository()
    return _repository
