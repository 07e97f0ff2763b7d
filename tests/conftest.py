"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Sample polygon rings
- Sample features and feature collections
- Stored record factory
- A fixed clock for deterministic timestamps
- FastAPI test client with a clean repository
"""
import copy
from datetime import datetime, timezone
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from paddock_api.main import app
from paddock_api.domain.models import PolygonGeometry, Record
from paddock_api.infrastructure.paddock_repository import get_repository


# ============================================================
# Sample Geometry Fixtures
# ============================================================

@pytest.fixture
def square_ring() -> list[list[float]]:
    """A closed ~100m x 100m square on the equator (about 1 hectare)."""
    return [
        [0.0, 0.0],  # lon, lat format
        [0.0009, 0.0],
        [0.0009, 0.0009],
        [0.0, 0.0009],
        [0.0, 0.0],  # Close the polygon
    ]


@pytest.fixture
def sample_polygon(square_ring) -> dict:
    """A GeoJSON Polygon geometry around the square ring."""
    return {"type": "Polygon", "coordinates": [square_ring]}


@pytest.fixture
def paddock_ring() -> list[list[float]]:
    """A closed paddock boundary in New South Wales."""
    return [
        [148.0, -33.0],
        [148.01, -33.0],
        [148.01, -33.01],
        [148.0, -33.01],
        [148.0, -33.0],
    ]


# ============================================================
# Sample Feature Fixtures
# ============================================================

@pytest.fixture
def make_feature(paddock_ring) -> Callable[..., dict]:
    """
    Factory for paddock features.

    Keyword arguments override properties; pass geometry= to replace the
    geometry and drop=[...] to remove properties.
    """
    def _make(geometry=None, drop=(), **overrides) -> dict:
        properties = {
            "id": "P-1",
            "name": "Home Paddock",
            "owner": "Alice",
            "Project__Name": "North Farm",
            "area_acres": 10,
        }
        properties.update(overrides)
        for key in drop:
            properties.pop(key, None)

        return {
            "type": "Feature",
            "properties": properties,
            "geometry": geometry if geometry is not None else {
                "type": "Polygon",
                "coordinates": [copy.deepcopy(paddock_ring)],
            },
        }

    return _make


@pytest.fixture
def sample_feature(make_feature) -> dict:
    """A single valid paddock feature."""
    return make_feature()


@pytest.fixture
def sample_collection(make_feature) -> dict:
    """A FeatureCollection of three valid paddocks across two projects."""
    return {
        "type": "FeatureCollection",
        "features": [
            make_feature(id="P-1", name="Home", owner="Alice", area_acres=10),
            make_feature(id="P-2", name="Creek", owner="Bob", area_acres="20"),
            make_feature(
                id="P-3", name="Ridge", owner="Carol",
                Project__Name="South Farm", area_acres=5,
            ),
        ],
    }


# ============================================================
# Sample Record Fixtures
# ============================================================

@pytest.fixture
def make_record(paddock_ring) -> Callable[..., Record]:
    """Factory for stored records that skips normalization."""
    def _make(
        project: str,
        owner: str = "Alice",
        acres: float = 10.0,
        valid: bool = True,
        uploaded_at: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc),
        ring=None,
    ) -> Record:
        return Record(
            id=f"{project}-{owner}",
            name="Paddock",
            owner=owner,
            project_name=project,
            area_acres=acres,
            area_hectares=acres * 0.404686,
            calculated_area_hectares=acres * 0.4,
            geometry=PolygonGeometry(coordinates=[ring or copy.deepcopy(paddock_ring)]),
            upload_batch="batch-1",
            uploaded_at=uploaded_at,
            is_valid=valid,
        )

    return _make


# ============================================================
# Clock Fixtures
# ============================================================

@pytest.fixture
def fixed_now() -> datetime:
    """A fixed, timezone-aware upload timestamp."""
    return datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock(fixed_now) -> Callable[[], datetime]:
    """Clock callable that always returns fixed_now."""
    return lambda: fixed_now


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client() -> Iterator[TestClient]:
    """Create a synchronous test client backed by an empty repository."""
    repository = get_repository()
    repository.clear()
    with TestClient(app) as client:
        yield client
    repository.clear()
