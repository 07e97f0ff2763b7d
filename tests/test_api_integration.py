"""
Integration tests for API endpoints.

Tests the full HTTP request/response cycle against the in-memory store.
"""
import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from paddock_api.config import settings
from paddock_api.domain.constants import ProjectPalette
from paddock_api.domain.exceptions import ProjectNotFoundError
from paddock_api.middleware.error_handler import ErrorHandlerMiddleware


def upload(test_client, payload) -> dict:
    response = test_client.post("/api/v1/upload/json", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


# ============================================================
# Health Check Tests
# ============================================================

class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_root_endpoint(self, test_client):
        """Root endpoint should return healthy status."""
        response = test_client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "service" in data
        assert "version" in data

    def test_health_endpoint(self, test_client):
        """Health endpoint should return healthy status."""
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


# ============================================================
# Upload Endpoint Tests
# ============================================================

class TestUploadEndpoints:
    """Tests for GeoJSON upload endpoints."""

    def test_upload_raw_geojson(self, test_client, sample_collection):
        """Raw GeoJSON bytes should be ingested."""
        response = test_client.post(
            "/api/v1/upload/geojson",
            content=json.dumps(sample_collection),
            headers={"Content-Type": "application/geo+json"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["results"] == {"total": 3, "successful": 3, "failed": 0, "errors": []}
        assert data["projects_updated"] == 2
        assert data["projects"] == ["North Farm", "South Farm"]
        assert data["message"] == "Successfully processed 3 of 3 features"

    def test_upload_reports_feature_errors(self, test_client, make_feature):
        """Rejected features should be listed with their index."""
        data = upload(test_client, {
            "type": "FeatureCollection",
            "features": [make_feature(), make_feature(drop=["owner"])],
        })

        assert data["results"]["successful"] == 1
        assert data["results"]["errors"] == [
            {"feature_index": 1, "errors": ["Feature must have owner property"]}
        ]

    def test_empty_body(self, test_client):
        """An empty body should be rejected."""
        response = test_client.post("/api/v1/upload/geojson", content=b"")

        assert response.status_code == 400
        assert response.json()["detail"] == "No data provided"

    def test_invalid_json(self, test_client):
        """Malformed JSON should be a 400 with the INVALID_JSON code."""
        response = test_client.post("/api/v1/upload/geojson", content=b"{oops")

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == "Invalid JSON format"
        assert detail["code"] == "INVALID_JSON"

    def test_empty_feature_collection(self, test_client):
        """An empty FeatureCollection should be a 400 with its code."""
        response = test_client.post(
            "/api/v1/upload/json",
            json={"type": "FeatureCollection", "features": []},
        )

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == "Invalid GeoJSON format"
        assert detail["code"] == "EMPTY_FEATURES"

    def test_non_object_body(self, test_client):
        """A JSON array should be rejected as not an object."""
        response = test_client.post("/api/v1/upload/json", json=[1, 2])

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "NOT_AN_OBJECT"

    def test_oversized_upload(self, test_client, monkeypatch):
        """Bodies above the size limit should be a 413."""
        monkeypatch.setattr(settings, "max_upload_bytes", 10)

        response = test_client.post("/api/v1/upload/geojson", content=b'{"type": "Feature"}')

        assert response.status_code == 413

    def test_oversized_coordinate_is_a_feature_error(self, test_client, sample_collection):
        """A 400-digit coordinate should reject one feature, not fail the request."""
        sample_collection["features"][2]["geometry"]["coordinates"][0][1][0] = int("1" + "0" * 400)

        response = test_client.post(
            "/api/v1/upload/geojson",
            content=json.dumps(sample_collection),
            headers={"Content-Type": "application/geo+json"},
        )

        assert response.status_code == 200
        results = response.json()["results"]
        assert (results["successful"], results["failed"]) == (2, 1)
        assert results["errors"][0]["feature_index"] == 2

    def test_batch_history(self, test_client, sample_feature):
        """Uploads should appear in the batch history."""
        first = upload(test_client, sample_feature)
        second = upload(test_client, sample_feature)

        response = test_client.get("/api/v1/upload/batches")

        assert response.status_code == 200
        batch_ids = {b["batch_id"] for b in response.json()["batches"]}
        assert batch_ids == {first["upload_batch"], second["upload_batch"]}


# ============================================================
# Paddock Endpoint Tests
# ============================================================

class TestPaddockEndpoints:
    """Tests for paddock endpoints."""

    def test_list_paddocks(self, test_client, sample_collection):
        """Paddocks should be listed as a FeatureCollection."""
        upload(test_client, sample_collection)

        response = test_client.get("/api/v1/paddocks", params={"limit": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "FeatureCollection"
        assert len(data["features"]) == 2
        assert data["pagination"] == {"total": 3, "limit": 2, "offset": 0, "has_more": True}

        properties = data["features"][0]["properties"]
        for key in ("id", "name", "owner", "Project__Name", "area_acres", "area_hectares", "uid"):
            assert key in properties

    def test_filter_by_owner(self, test_client, sample_collection):
        """The owner filter should be exact."""
        upload(test_client, sample_collection)

        data = test_client.get("/api/v1/paddocks", params={"owner": "Bob"}).json()

        assert [f["properties"]["name"] for f in data["features"]] == ["Creek"]

    def test_bad_sort(self, test_client):
        """An unsupported sort field should be a 400."""
        response = test_client.get("/api/v1/paddocks", params={"sort": "colour"})
        assert response.status_code == 400

    def test_get_and_delete_paddock(self, test_client, sample_feature):
        """A paddock should be retrievable and deletable by uid."""
        upload(test_client, sample_feature)
        uid = test_client.get("/api/v1/paddocks").json()["features"][0]["properties"]["uid"]

        response = test_client.get(f"/api/v1/paddocks/{uid}")
        assert response.status_code == 200
        assert response.json()["geometry"]["type"] == "Polygon"

        response = test_client.delete(f"/api/v1/paddocks/{uid}")
        assert response.status_code == 200
        assert response.json()["deleted_paddocks"] == 1

        assert test_client.get(f"/api/v1/paddocks/{uid}").status_code == 404
        assert test_client.get("/api/v1/projects").json() == []

    def test_missing_paddock(self, test_client):
        """Unknown paddocks should be a 404."""
        assert test_client.get("/api/v1/paddocks/unknown").status_code == 404
        assert test_client.delete("/api/v1/paddocks/unknown").status_code == 404

    def test_project_paddocks(self, test_client, sample_collection):
        """Paddocks of one project should be listed."""
        upload(test_client, sample_collection)

        data = test_client.get("/api/v1/paddocks/project/South Farm").json()

        assert data["pagination"]["total"] == 1
        assert data["features"][0]["properties"]["name"] == "Ridge"

    def test_paddock_summary(self, test_client, sample_collection):
        """The summary should total every paddock."""
        upload(test_client, sample_collection)

        data = test_client.get("/api/v1/paddocks/stats/summary").json()

        assert data["project_count"] == 2
        assert data["total_paddocks"] == 3
        assert data["total_area_acres"] == pytest.approx(35.0)
        assert data["owner_count"] == 3


# ============================================================
# Project Endpoint Tests
# ============================================================

class TestProjectEndpoints:
    """Tests for project endpoints."""

    def test_list_projects(self, test_client, sample_collection):
        """Projects should be listed with statistics and colors."""
        upload(test_client, sample_collection)

        projects = test_client.get("/api/v1/projects").json()

        assert [p["name"] for p in projects] == ["North Farm", "South Farm"]
        assert projects[0]["total_paddocks"] == 2
        assert projects[0]["owners"] == ["Alice", "Bob"]
        assert [p["color"] for p in projects] == list(ProjectPalette.COLORS[:2])

    def test_project_detail(self, test_client, sample_collection):
        """Project details should include its paddocks."""
        upload(test_client, sample_collection)

        response = test_client.get("/api/v1/projects/North Farm")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "North Farm"
        assert {p["name"] for p in data["paddocks"]} == {"Home", "Creek"}

    def test_update_project(self, test_client, sample_collection):
        """Description and color should be editable."""
        upload(test_client, sample_collection)

        response = test_client.put(
            "/api/v1/projects/North Farm",
            json={"description": "Irrigated", "color": "#112233"},
        )

        assert response.status_code == 200
        assert response.json()["color"] == "#112233"

        refreshed = test_client.post("/api/v1/projects/refresh-stats").json()
        north = next(p for p in refreshed["projects"] if p["name"] == "North Farm")
        assert north["description"] == "Irrigated"
        assert north["color"] == "#112233"

    def test_update_rejects_bad_color(self, test_client, sample_collection):
        """Colors must be #RRGGBB."""
        upload(test_client, sample_collection)

        response = test_client.put("/api/v1/projects/North Farm", json={"color": "blue"})
        assert response.status_code == 422

    def test_delete_project(self, test_client, sample_collection):
        """Deleting a project should delete its paddocks."""
        upload(test_client, sample_collection)

        response = test_client.delete("/api/v1/projects/North Farm")

        assert response.status_code == 200
        assert response.json()["deleted_paddocks"] == 2
        assert test_client.get("/api/v1/paddocks").json()["pagination"]["total"] == 1

    def test_missing_project(self, test_client):
        """Unknown projects should be a 404."""
        assert test_client.get("/api/v1/projects/Nowhere").status_code == 404
        assert test_client.put("/api/v1/projects/Nowhere", json={}).status_code == 404
        assert test_client.delete("/api/v1/projects/Nowhere").status_code == 404

    def test_project_summary(self, test_client, sample_collection):
        """The project summary should agree with the paddock summary."""
        upload(test_client, sample_collection)

        projects = test_client.get("/api/v1/projects/stats/summary").json()
        paddocks = test_client.get("/api/v1/paddocks/stats/summary").json()

        assert projects["total_paddocks"] == paddocks["total_paddocks"]
        assert projects["owners"] == paddocks["owners"]


# ============================================================
# Response Format Tests
# ============================================================

class TestResponseFormats:
    """Tests for API documentation endpoints."""

    def test_openapi_schema_available(self, test_client):
        """OpenAPI schema should list the paddock routes."""
        response = test_client.get("/openapi.json")

        assert response.status_code == 200
        paths = response.json()["paths"]
        assert "/api/v1/upload/geojson" in paths
        assert "/api/v1/paddocks/{uid}" in paths
        assert "/api/v1/projects/{project_name}" in paths

    def test_docs_endpoint_available(self, test_client):
        """Swagger docs should be available."""
        response = test_client.get("/docs")

        assert response.status_code == 200
        assert "swagger" in response.text.lower() or "html" in response.headers.get("content-type", "")


# ============================================================
# Error Middleware Tests
# ============================================================

@pytest.fixture
def failing_client() -> TestClient:
    """A bare app whose routes raise untranslated errors."""
    failing_app = FastAPI()
    failing_app.add_middleware(ErrorHandlerMiddleware)

    @failing_app.get("/bad-value")
    async def bad_value():
        raise ValueError("limit must be positive")

    @failing_app.get("/crash")
    async def crash():
        raise RuntimeError("boom")

    @failing_app.get("/missing")
    async def missing():
        raise ProjectNotFoundError("Project 'Nowhere' not found")

    return TestClient(failing_app)


class TestErrorHandlerMiddleware:
    """Tests for the error middleware backstop."""

    def test_value_error_is_bad_request(self, failing_client):
        """Untranslated ValueErrors should become 400s."""
        response = failing_client.get("/bad-value")

        assert response.status_code == 400
        assert response.json() == {
            "error": "Invalid request",
            "detail": "limit must be positive",
        }

    def test_unexpected_error_is_hidden(self, failing_client):
        """Unexpected errors should become a generic 500."""
        response = failing_client.get("/crash")

        assert response.status_code == 500
        assert response.json()["detail"] == "An unexpected error occurred"

    def test_untranslated_not_found_is_server_error(self, failing_client):
        """Not-found errors are translated by routers, not by the middleware."""
        assert failing_client.get("/missing").status_code == 500

    def test_routers_translate_not_found(self, test_client):
        """Router-level translation should produce the 404 detail."""
        response = test_client.get("/api/v1/projects/Nowhere")

        assert response.status_code == 404
        assert response.json() == {"detail": "Project 'Nowhere' not found"}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
