"""Tests for error handling across the API and the exception types."""

import pytest
from fastapi.testclient import TestClient

from blendrec.api.exceptions import (
    BlendRecException,
    DataLoadError,
    DataNotFoundError,
    InvalidModeError,
    RecommendationError,
)
from blendrec.api.main import app
from blendrec.api.metrics import metrics_service
from blendrec.api.routes import recommend as recommend_module
from blendrec.config import RecommenderConfig

client = TestClient(app)


@pytest.fixture(autouse=True)
def reset_api():
    yield
    recommend_module.reset_state()
    metrics_service.reset()


@pytest.fixture
def configured(data_dir):
    recommend_module.reset_state(RecommenderConfig(data_dir=str(data_dir)))
    return data_dir


# ===== Exception types =====


def test_exception_to_dict():
    exc = BlendRecException("boom", status_code=418, details={"a": 1})

    assert exc.to_dict() == {"error": "BlendRecException", "message": "boom", "details": {"a": 1}}
    assert str(exc) == "boom"


def test_status_codes():
    assert DataNotFoundError("/tmp/x").status_code == 503
    assert DataLoadError("/tmp/x", ValueError("bad")).status_code == 500
    assert InvalidModeError("cf", ("hybrid",)).status_code == 400
    assert RecommendationError("u", RuntimeError("x")).status_code == 500


def test_data_load_error_details():
    exc = DataLoadError("/tmp/x", ValueError("bad column"))

    assert exc.details["error_type"] == "ValueError"
    assert "bad column" in exc.message


# ===== API errors =====


def test_invalid_mode_returns_400(configured):
    response = client.get("/recommend/u-1", params={"mode": "bogus"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "InvalidModeError"
    assert body["details"]["mode"] == "bogus"
    assert "hybrid" in body["details"]["allowed"]


def test_missing_data_returns_503(tmp_path):
    recommend_module.reset_state(RecommenderConfig(data_dir=str(tmp_path / "missing")))

    response = client.get("/recommend/u-1")

    assert response.status_code == 503
    assert response.json()["error"] == "DataNotFoundError"


def test_missing_data_for_similar_returns_503(tmp_path):
    recommend_module.reset_state(RecommenderConfig(data_dir=str(tmp_path / "missing")))

    assert client.get("/recommend/similar/p-1").status_code == 503


def test_corrupt_catalog_returns_500(tmp_path):
    (tmp_path / "catalog.csv").write_text("id,price\na,1.0\n")
    (tmp_path / "interactions.csv").write_text("user_id,item_id,interaction_type,timestamp\n")
    recommend_module.reset_state(RecommenderConfig(data_dir=str(tmp_path)))

    response = client.get("/recommend/u-1")

    assert response.status_code == 500
    assert response.json()["error"] == "DataLoadError"


@pytest.mark.parametrize("top_n", [0, -1, 101])
def test_top_n_out_of_range_returns_422(configured, top_n):
    response = client.get("/recommend/u-1", params={"top_n": top_n})

    assert response.status_code == 422


def test_similar_top_n_zero_returns_422(configured):
    assert client.get("/recommend/similar/p-1", params={"top_n": 0}).status_code == 422
