"""Tests for the inference module."""

import pytest

from blendrec.recommender.content import CONTENT_REASON, POPULAR_REASON
from blendrec.recommender.affinity import AFFINITY_REASON
from blendrec.recommender.infer import (
    batch_recommend_for_users,
    recommend_for_user,
    recommend_from_snapshot,
    validate_mode,
)
from conftest import NOW, make_interaction


def test_validate_mode():
    assert validate_mode("Hybrid") == "hybrid"
    assert validate_mode(" content ") == "content"
    with pytest.raises(ValueError):
        validate_mode("cf")


def test_recommend_for_user_known_user_returns_n_items(data_dir):
    recommendations = recommend_for_user("u-1", data_dir=str(data_dir), top_n=5, now=NOW)

    assert len(recommendations) == 5
    ids = [rec.item_id for rec in recommendations]
    assert len(ids) == len(set(ids))
    assert set(ids).isdisjoint({"p-1", "p-2", "p-7"})


@pytest.mark.parametrize(
    "mode, reason",
    [("content", CONTENT_REASON), ("collaborative", AFFINITY_REASON)],
)
def test_recommend_for_user_modes(data_dir, mode, reason):
    recommendations = recommend_for_user("u-1", data_dir=str(data_dir), top_n=3, mode=mode, now=NOW)

    assert len(recommendations) == 3
    assert all(rec.reason == reason for rec in recommendations)


def test_recommend_for_unknown_user_uses_popular_products(data_dir):
    recommendations = recommend_for_user(
        "stranger", data_dir=str(data_dir), top_n=5, mode="content", now=NOW
    )

    assert len(recommendations) == 5
    assert all(rec.reason == POPULAR_REASON for rec in recommendations)
    assert recommendations[0].item_id == "p-9"


def test_recommend_for_user_missing_data_raises_filenotfounderror(tmp_path):
    with pytest.raises(FileNotFoundError):
        recommend_for_user("u-1", data_dir=str(tmp_path / "nonexistent"), top_n=5)


def test_recommend_for_user_invalid_mode(data_dir):
    with pytest.raises(ValueError):
        recommend_for_user("u-1", data_dir=str(data_dir), mode="bogus")


def test_recommend_from_snapshot(catalog):
    interactions = [make_interaction("p-3")]
    recommendations = recommend_from_snapshot(catalog, interactions, top_n=4, mode="hybrid", now=NOW)

    assert len(recommendations) == 4
    assert "p-3" not in {rec.item_id for rec in recommendations}


def test_batch_recommend_for_users(data_dir):
    user_ids = ["u-1", "u-2", "u-3", "stranger"]
    results = batch_recommend_for_users(user_ids, data_dir=str(data_dir), top_n=3, n_jobs=2, now=NOW)

    assert list(results) == user_ids
    assert all(len(recs) == 3 for recs in results.values())
    assert "p-9" not in {rec.item_id for rec in results["u-2"]}


def test_batch_matches_single_user(data_dir):
    batch = batch_recommend_for_users(["u-1"], data_dir=str(data_dir), top_n=4, n_jobs=1, now=NOW)
    single = recommend_for_user("u-1", data_dir=str(data_dir), top_n=4, now=NOW)

    assert batch["u-1"] == single


def test_batch_missing_data(tmp_path):
    with pytest.raises(FileNotFoundError):
        batch_recommend_for_users(["u-1"], data_dir=str(tmp_path / "nope"))
