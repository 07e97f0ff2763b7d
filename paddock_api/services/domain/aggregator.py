"""
Domain service: Project rollups and color assignment.

Project statistics are a pure function of the current record set. They are
recomputed wholesale on every request, never patched incrementally.
"""
from collections import defaultdict
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence
import logging

from paddock_api.config import settings
from paddock_api.domain.constants import ProjectPalette
from paddock_api.domain.models import GlobalStats, ProjectStats, Record
from paddock_api.services.domain.geometry_engine import GeometryEngine

logger = logging.getLogger(__name__)


def _creation_order(project: ProjectStats) -> datetime:
    return project.created_at


def assign_colors(
    projects: Sequence[ProjectStats],
    default_color: Optional[str] = None,
) -> list[ProjectStats]:
    """
    Give palette colors to projects that still have no custom color.

    Projects are walked in ascending creation order (ties keep input order).
    The project at position i gets palette color i mod 12 if its color is
    unset or still the default; customized colors are never overwritten.
    Running this twice gives the same result as running it once.

    Args:
        projects: Project statistics
        default_color: Color treated as "not customized" (defaults to settings)

    Returns:
        New ProjectStats objects in creation order
    """
    default_color = default_color or settings.default_project_color
    ordered = sorted(projects, key=_creation_order)

    colored = []
    for position, project in enumerate(ordered):
        if not project.color or project.color == default_color:
            color = ProjectPalette.color_for(position)
            project = project.model_copy(update={"color": color})
        colored.append(project)

    return colored


class ProjectAggregator:
    """
    Domain service for per-project and global statistics.

    Groups records by exact project name, sums declared and calculated areas,
    collects owners and computes bounds through the geometry engine.
    """

    def __init__(self, geometry_engine: Optional[GeometryEngine] = None):
        """
        Initialize the aggregator.

        Args:
            geometry_engine: Engine used for project bounds
        """
        self.geometry_engine = geometry_engine or GeometryEngine()

    def aggregate(
        self,
        records: Iterable[Record],
        previous: Optional[Sequence[ProjectStats]] = None,
    ) -> list[ProjectStats]:
        """
        Compute statistics for every project that has at least one record.

        Description, color and creation time are carried over from previous
        statistics of the same project; a project with no records is absent
        from the result.

        Args:
            records: Current record set
            previous: Earlier statistics holding project metadata

        Returns:
            List of ProjectStats ordered by creation time, then name
        """
        groups: dict[str, list[Record]] = defaultdict(list)
        for record in records:
            groups[record.project_name].append(record)

        known = {project.project_name: project for project in previous or []}
        now = datetime.now(timezone.utc)

        projects = []
        for project_name, group in groups.items():
            prior = known.get(project_name)
            projects.append(self._project_stats(project_name, group, prior, now))

        dropped = set(known) - set(groups)
        if dropped:
            logger.info(f"Dropping {len(dropped)} projects with no paddocks: {sorted(dropped)}")

        projects.sort(key=lambda p: (p.created_at, p.project_name))
        return projects

    def _project_stats(
        self,
        project_name: str,
        group: list[Record],
        prior: Optional[ProjectStats],
        now: datetime,
    ) -> ProjectStats:
        """
        Build statistics for one project group.

        Args:
            project_name: Exact project name
            group: Records of the project (non-empty)
            prior: Previous statistics of the project, if any
            now: Timestamp used for last_updated

        Returns:
            ProjectStats instance
        """
        total_records = len(group)
        valid_records = sum(1 for record in group if record.is_valid)
        total_area_hectares = sum(record.area_hectares for record in group)

        return ProjectStats(
            project_name=project_name,
            description=prior.description if prior else None,
            total_records=total_records,
            valid_records=valid_records,
            invalid_records=total_records - valid_records,
            total_area_acres=sum(record.area_acres for record in group),
            total_area_hectares=total_area_hectares,
            calculated_area_hectares=sum(record.calculated_area_hectares for record in group),
            average_record_size_hectares=(
                total_area_hectares / valid_records if valid_records > 0 else 0.0
            ),
            owners={record.owner for record in group},
            bounds=self.geometry_engine.compute_bounds(record.geometry for record in group),
            color=prior.color if prior else settings.default_project_color,
            created_at=prior.created_at if prior else min(r.uploaded_at for r in group),
            last_updated=now,
        )

    def summarize_projects(self, projects: Sequence[ProjectStats]) -> GlobalStats:
        """
        Fold per-project statistics into global totals.

        Args:
            projects: Project statistics

        Returns:
            GlobalStats consistent with the sum of the project totals
        """
        project_count = len(projects)
        total_area_hectares = sum(p.total_area_hectares for p in projects)
        owners: set[str] = set()
        for project in projects:
            owners |= project.owners

        return GlobalStats(
            project_count=project_count,
            total_records=sum(p.total_records for p in projects),
            valid_records=sum(p.valid_records for p in projects),
            invalid_records=sum(p.invalid_records for p in projects),
            total_area_acres=sum(p.total_area_acres for p in projects),
            total_area_hectares=total_area_hectares,
            calculated_area_hectares=sum(p.calculated_area_hectares for p in projects),
            average_project_size_hectares=(
                total_area_hectares / project_count if project_count > 0 else 0.0
            ),
            owners=owners,
            projects=[p.project_name for p in projects],
        )

    def summarize(self, records: Iterable[Record]) -> GlobalStats:
        """
        Compute global totals for a record set via its project rollups.

        Args:
            records: Current record set

        Returns:
            GlobalStats
        """
        return self.summarize_projects(self.aggregate(records))
