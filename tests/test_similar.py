"""Tests for similar-item lookup."""

import pytest

from blendrec.recommender.similar import SIMILAR_REASON, similar_items
from conftest import make_item


def test_unknown_seed_returns_empty(catalog):
    assert similar_items(catalog, "does-not-exist") == []


def test_empty_catalog_returns_empty():
    assert similar_items([], "p-1") == []


def test_excludes_only_the_seed(catalog):
    results = similar_items(catalog, "p-1", limit=len(catalog))
    ids = [rec.item_id for rec in results]

    assert "p-1" not in ids
    assert len(ids) == len(catalog) - 1
    assert all(rec.reason == SIMILAR_REASON for rec in results)


def test_default_limit_is_four(catalog):
    assert len(similar_items(catalog, "p-1")) == 4


def test_most_similar_first():
    catalog = [
        make_item("seed", category="Pets", brand="PetComfort"),
        make_item("far", category="Electronics", brand="PhotoPro"),
        make_item("near", category="Pets", brand="PetComfort", price=120.0),
        make_item("mid", category="Pets", brand="RunFast"),
    ]

    results = similar_items(catalog, "seed", limit=3)

    assert [rec.item_id for rec in results] == ["near", "mid", "far"]
    assert results[0].score == pytest.approx(1.0, abs=1e-3)


def test_limit_three(catalog):
    results = similar_items(catalog, "p-5", limit=3)

    assert len(results) == 3
    scores = [rec.score for rec in results]
    assert scores == sorted(scores, reverse=True)
