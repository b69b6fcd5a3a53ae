"""Tests for item feature vectors and cosine similarity."""

import math

import numpy as np
import pytest

from blendrec.config import Taxonomy
from blendrec.recommender.embed import (
    CatalogEmbeddings,
    FeatureVectorizer,
    cosine_similarities,
    cosine_similarity,
)
from conftest import make_item


@pytest.fixture
def vectorizer():
    return FeatureVectorizer()


def test_default_vector_length(vectorizer):
    """Five categories, eight brands, price and rating."""
    assert vectorizer.dimension == 15
    assert vectorizer.vectorize(make_item("a")).shape == (15,)


def test_vector_layout(vectorizer):
    item = make_item("a", category="Home & Garden", brand="BrewMaster", price=100.0, rating=4.0)
    vector = vectorizer.vectorize(item)

    # Category block
    np.testing.assert_array_equal(vector[:5], [0, 0, 1, 0, 0])
    # Brand block
    np.testing.assert_array_equal(vector[5:13], [0, 0, 0, 1, 0, 0, 0, 0])
    assert vector[13] == pytest.approx(math.log(100.0) / 10)
    assert vector[14] == pytest.approx(0.8)


def test_unknown_category_and_brand_encode_as_zeros(vectorizer):
    vector = vectorizer.vectorize(make_item("a", category="Toys", brand="NoName"))
    assert not vector[:13].any()


def test_non_positive_price_contributes_zero(vectorizer):
    free = vectorizer.vectorize(make_item("a", price=0.0))
    negative = vectorizer.vectorize(make_item("b", price=-5.0))

    assert free[-2] == 0.0
    assert negative[-2] == 0.0
    # Rest of the vector is still encoded
    assert free[0] == 1.0


def test_custom_taxonomy_sets_dimension():
    taxonomy = Taxonomy(categories=("Books", "Music"), brands=("Indie",))
    vectorizer = FeatureVectorizer(taxonomy)

    assert vectorizer.dimension == 5
    vector = vectorizer.vectorize(make_item("a", category="Music", brand="Indie", price=1.0, rating=5.0))
    np.testing.assert_array_almost_equal(vector, [0, 1, 1, 0, 1])


def test_vectorize_is_deterministic(vectorizer):
    item = make_item("a", price=42.0, rating=3.3)
    np.testing.assert_array_equal(vectorizer.vectorize(item), vectorizer.vectorize(item))


def test_vectorize_empty_catalog(vectorizer):
    assert vectorizer.vectorize_catalog([]).shape == (0, 15)


def test_cosine_similarity_zero_vector():
    assert cosine_similarity(np.zeros(3), np.array([1.0, 2.0, 3.0])) == 0.0
    assert cosine_similarity(np.zeros(3), np.zeros(3)) == 0.0


def test_cosine_similarity_symmetric_and_self(vectorizer, catalog):
    vectors = [vectorizer.vectorize(item) for item in catalog]

    for a in vectors:
        assert cosine_similarity(a, a) == pytest.approx(1.0)
        for b in vectors:
            assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))


def test_cosine_similarities_matches_pairwise(vectorizer, catalog):
    matrix = vectorizer.vectorize_catalog(catalog)
    query = matrix[0]

    batch = cosine_similarities(query, matrix)
    expected = [cosine_similarity(query, row) for row in matrix]
    np.testing.assert_array_almost_equal(batch, expected)


def test_cosine_similarities_zero_query(vectorizer, catalog):
    matrix = vectorizer.vectorize_catalog(catalog)
    np.testing.assert_array_equal(cosine_similarities(np.zeros(15), matrix), np.zeros(len(catalog)))


def test_catalog_embeddings_lookup(catalog):
    embeddings = CatalogEmbeddings(catalog)

    assert len(embeddings) == len(catalog)
    assert embeddings.get_embedding("p-1").shape == (15,)
    assert embeddings.get_embedding("nope") is None
    assert embeddings.get_item("p-2").name == "Bluetooth Speaker"
    assert embeddings.compute_similarity("p-1", "p-1") == pytest.approx(1.0)
    assert embeddings.compute_similarity("p-1", "nope") is None


def test_catalog_embeddings_scored_items_excludes(catalog):
    embeddings = CatalogEmbeddings(catalog)
    scored = embeddings.scored_items(embeddings.get_embedding("p-1"), exclude_ids={"p-1", "p-2"})

    ids = [item.id for item, _ in scored]
    assert "p-1" not in ids and "p-2" not in ids
    assert ids == [item.id for item in catalog if item.id not in {"p-1", "p-2"}]
