"""Content-based recommendations.

Builds a user preference vector as the weighted average of the feature
vectors of items the user interacted with, then ranks the items the user
hasn't touched by cosine similarity to it.
"""

import logging
import math
import time
from typing import List, Optional, Sequence, Tuple

import numpy as np

from blendrec.config import DEFAULT_DECAY_DAYS
from blendrec.recommender.embed import CatalogEmbeddings, FeatureVectorizer
from blendrec.recommender.models import Interaction, Item, RecommendationScore
from blendrec.recommender.utils import rank_scores
from blendrec.recommender.weighting import interaction_weight

# Configure module logger
logger = logging.getLogger(__name__)

CONTENT_REASON = "Based on your preferences"
POPULAR_REASON = "Popular products"
DEFAULT_LIMIT = 10


def build_preference_vector(
    embeddings: CatalogEmbeddings,
    interactions: Sequence[Interaction],
    now: Optional[float] = None,
    decay_days: float = DEFAULT_DECAY_DAYS,
    clamp_future: bool = False,
) -> Tuple[np.ndarray, float]:
    """Weighted average of the vectors of interacted items.

    Interactions pointing at items missing from the catalog are skipped.

    Returns:
        A tuple of (preference vector, total weight). The vector is all-zero
        when nothing contributed any weight.
    """
    if now is None:
        now = time.time()

    weighted_vector = embeddings.vectorizer.zeros()
    total_weight = 0.0

    for interaction in interactions:
        item_vector = embeddings.get_embedding(interaction.item_id)
        if item_vector is None:
            logger.debug(f"Skipping interaction on unknown item {interaction.item_id}")
            continue

        weight = interaction_weight(
            interaction, now=now, decay_days=decay_days, clamp_future=clamp_future
        )
        weighted_vector += weight * item_vector
        total_weight += weight

    if total_weight > 0:
        weighted_vector /= total_weight

    return weighted_vector, total_weight


def popularity_score(item: Item) -> float:
    """Popularity heuristic ``rating * ln(review_count + 1)``."""
    return item.rating * math.log(item.review_count + 1)


def popular_recommendations(
    catalog: Sequence[Item],
    limit: int = DEFAULT_LIMIT,
) -> List[RecommendationScore]:
    """Rank the catalog by popularity for users with no interactions.

    Ties keep catalog order.
    """
    scores = [
        RecommendationScore(item_id=item.id, score=popularity_score(item), reason=POPULAR_REASON)
        for item in catalog
    ]
    return rank_scores(scores, limit)


def content_based_recommendations(
    catalog: Sequence[Item],
    interactions: Sequence[Interaction],
    limit: int = DEFAULT_LIMIT,
    now: Optional[float] = None,
    vectorizer: Optional[FeatureVectorizer] = None,
    decay_days: float = DEFAULT_DECAY_DAYS,
    clamp_future: bool = False,
    embeddings: Optional[CatalogEmbeddings] = None,
) -> List[RecommendationScore]:
    """Recommend items similar to what the user already engaged with.

    When the interaction log is empty the user has no preferences to match,
    so the popularity ranking (reason "Popular products") is returned
    instead.

    Args:
        catalog: Catalog snapshot.
        interactions: The user's interaction log.
        limit: Maximum number of results.
        now: Reference epoch time in seconds for time decay.
        vectorizer: Feature vectorizer; defaults to the storefront taxonomy.
        decay_days: Time-decay scale in days.
        clamp_future: Clamp future timestamps to ``now``.
        embeddings: Pre-vectorized catalog, reused when given.

    Returns:
        Up to ``limit`` scores sorted by descending similarity, excluding
        every item that appears in the interaction log.
    """
    if not interactions:
        logger.info("No interactions, falling back to popular products")
        return popular_recommendations(catalog, limit)

    if embeddings is None:
        embeddings = CatalogEmbeddings(catalog, vectorizer)

    user_vector, total_weight = build_preference_vector(
        embeddings, interactions, now=now, decay_days=decay_days, clamp_future=clamp_future
    )

    interacted_ids = {interaction.item_id for interaction in interactions}
    candidates = embeddings.scored_items(user_vector, exclude_ids=interacted_ids)

    scores = [
        RecommendationScore(item_id=item.id, score=similarity, reason=CONTENT_REASON)
        for item, similarity in candidates
    ]

    logger.debug(
        "Computed content-based scores",
        extra={
            "num_candidates": len(scores),
            "total_weight": round(total_weight, 4),
        },
    )

    return rank_scores(scores, limit)
