"""Smoke tests for FastAPI application."""

from fastapi.testclient import TestClient


def test_health_endpoint(client: TestClient) -> None:
    """Health endpoint should return status ok."""

    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_version_endpoint(client: TestClient) -> None:
    """Version endpoint should expose application version."""

    response = client.get("/version")
    assert response.status_code == 200
    assert "version" in response.json()


def test_about_endpoint(client: TestClient) -> None:
    response = client.get("/about")
    assert response.status_code == 200
    body = response.json()
    assert body["doctor_name"] == "Dr. Rachitha"
    assert body["version"] == "0.1.0"


def test_openapi_models_carry_descriptions(client: TestClient) -> None:
    """Every documented response model should describe itself in the schema."""

    schemas = client.get("/openapi.json").json()["components"]["schemas"]
    for name in (
        "DashboardSummary",
        "GenderDistribution",
        "ConditionCount",
        "SearchResponse",
        "SearchSource",
        "PlanSection",
        "ViewState",
        "AboutInfo",
    ):
        descriptions = [
            value.get("description")
            for key, value in schemas.items()
            if key.split("-")[0] == name
        ]
        assert descriptions and all(descriptions), name
