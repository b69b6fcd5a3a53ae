"""Tests for the FastAPI application endpoints.

This module contains integration tests for the BlendRec API endpoints,
including health checks, recommendations and similar-item lookups.
"""

import pytest
from fastapi.testclient import TestClient

from blendrec import __version__
from blendrec.api.main import app
from blendrec.api.metrics import metrics_service
from blendrec.api.routes import recommend as recommend_module
from blendrec.config import RecommenderConfig
from blendrec.recommender.content import CONTENT_REASON, POPULAR_REASON

# Create test client
client = TestClient(app)


@pytest.fixture(autouse=True)
def api_state(data_dir):
    """Point the API at the test snapshots and reset shared state."""
    recommend_module.reset_state(RecommenderConfig(data_dir=str(data_dir)))
    metrics_service.reset()
    yield
    recommend_module.reset_state()
    metrics_service.reset()


def test_ping_endpoint():
    """Test that the /ping endpoint returns correct status and JSON."""
    response = client.get("/ping")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert "X-Request-ID" in response.headers


def test_status_before_and_after_loading():
    data = client.get("/status").json()

    assert data["data_loaded"] is False
    assert data["timestamp_last_loaded"] is None
    assert data["num_items"] == 0
    assert data["version"] == __version__

    client.get("/recommend/u-1")
    data = client.get("/status").json()

    assert data["data_loaded"] is True
    assert isinstance(data["timestamp_last_loaded"], str)
    assert data["num_items"] == 10
    assert data["num_users"] == 3
    assert data["metrics"]["inference_count"] == 1


def test_recommend_endpoint_returns_response():
    """Test that /recommend/{user_id} returns a valid response structure."""
    response = client.get("/recommend/u-1", params={"top_n": 5})

    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == "u-1"
    assert data["mode"] == "hybrid"
    assert data["cached"] is False
    assert data["scores"] is None
    assert data["version"] == __version__

    recommendations = data["recommendations"]
    assert len(recommendations) == 5
    for rec in recommendations:
        assert set(rec) == {"item_id", "score", "reason"}
    assert {rec["item_id"] for rec in recommendations}.isdisjoint({"p-1", "p-2", "p-7"})
    scores = [rec["score"] for rec in recommendations]
    assert scores == sorted(scores, reverse=True)


def test_recommend_content_mode():
    data = client.get("/recommend/u-1", params={"mode": "content", "top_n": 3}).json()

    assert data["mode"] == "content"
    assert all(rec["reason"] == CONTENT_REASON for rec in data["recommendations"])


def test_unknown_user_gets_popular_products():
    data = client.get("/recommend/nobody", params={"mode": "content", "top_n": 4}).json()

    assert len(data["recommendations"]) == 4
    assert all(rec["reason"] == POPULAR_REASON for rec in data["recommendations"])


def test_second_request_is_cached():
    first = client.get("/recommend/u-1", params={"top_n": 3}).json()
    second = client.get("/recommend/u-1", params={"top_n": 3}).json()

    assert first["cached"] is False
    assert second["cached"] is True
    assert second["recommendations"] == first["recommendations"]

    metrics = client.get("/status").json()["metrics"]
    assert metrics["cache_hits"] == 1
    assert metrics["cache_misses"] == 1


def test_explain_returns_score_breakdown():
    data = client.get("/recommend/u-1", params={"top_n": 3, "explain": True}).json()

    assert data["cached"] is False
    breakdown = data["scores"]
    assert breakdown["content_weight"] == pytest.approx(0.6)
    assert breakdown["affinity_weight"] == pytest.approx(0.4)
    for rec in data["recommendations"]:
        assert breakdown["hybrid_scores"][rec["item_id"]] == pytest.approx(rec["score"])


def test_similar_items_endpoint():
    response = client.get("/recommend/similar/p-1")

    assert response.status_code == 200
    data = response.json()
    assert data["item_id"] == "p-1"
    assert len(data["recommendations"]) == 4
    assert all(rec["item_id"] != "p-1" for rec in data["recommendations"])


def test_similar_items_unknown_seed_is_empty():
    response = client.get("/recommend/similar/missing", params={"top_n": 3})

    assert response.status_code == 200
    assert response.json()["recommendations"] == []


def test_reload_data():
    client.get("/recommend/u-1")

    response = client.post("/recommend/reload-data")

    assert response.status_code == 200
    assert response.json() == {"status": "Data reloaded successfully"}
    assert client.get("/status").json()["data_loaded"] is True
    assert client.get("/recommend/u-1").json()["cached"] is False
