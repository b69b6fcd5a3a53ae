"""Category-affinity recommendations.

A lightweight stand-in for collaborative filtering: the user's weighted
engagement per category is turned into a distribution, and un-interacted
items are scored by their category's share blended with popularity and
rating.
"""

import logging
import math
import time
from typing import Dict, List, Optional, Sequence

from blendrec.config import DEFAULT_DECAY_DAYS
from blendrec.recommender.models import Interaction, Item, RecommendationScore
from blendrec.recommender.utils import rank_scores
from blendrec.recommender.weighting import interaction_weight

# Configure module logger
logger = logging.getLogger(__name__)

AFFINITY_REASON = "Popular in your categories"
DEFAULT_LIMIT = 10

# Blend of the affinity score
CATEGORY_WEIGHT = 0.5
POPULARITY_WEIGHT = 0.3
RATING_WEIGHT = 0.2


def category_affinity(
    catalog: Sequence[Item],
    interactions: Sequence[Interaction],
    now: Optional[float] = None,
    decay_days: float = DEFAULT_DECAY_DAYS,
    clamp_future: bool = False,
) -> Dict[str, float]:
    """Share of the user's weighted engagement that fell in each category.

    Returns:
        Mapping of category to a value in [0, 1]; values sum to 1. Empty when
        no interaction resolved to a catalog item.
    """
    if now is None:
        now = time.time()

    items_by_id = {item.id: item for item in catalog}
    category_weights: Dict[str, float] = {}

    for interaction in interactions:
        item = items_by_id.get(interaction.item_id)
        if item is None:
            continue
        weight = interaction_weight(
            interaction, now=now, decay_days=decay_days, clamp_future=clamp_future
        )
        category_weights[item.category] = category_weights.get(item.category, 0.0) + weight

    total = sum(category_weights.values())
    if total <= 0:
        return {}

    return {category: weight / total for category, weight in category_weights.items()}


def affinity_score(item: Item, affinity: Dict[str, float]) -> float:
    """Blend category affinity, review popularity and rating for one item."""
    category_score = affinity.get(item.category, 0.0)
    popularity = math.log(item.review_count + 1) / 10
    rating = item.rating / 5
    return (
        CATEGORY_WEIGHT * category_score
        + POPULARITY_WEIGHT * popularity
        + RATING_WEIGHT * rating
    )


def collaborative_recommendations(
    catalog: Sequence[Item],
    interactions: Sequence[Interaction],
    limit: int = DEFAULT_LIMIT,
    now: Optional[float] = None,
    decay_days: float = DEFAULT_DECAY_DAYS,
    clamp_future: bool = False,
) -> List[RecommendationScore]:
    """Recommend popular items from the categories the user engages with.

    Args:
        catalog: Catalog snapshot.
        interactions: The user's interaction log.
        limit: Maximum number of results.
        now: Reference epoch time in seconds for time decay.
        decay_days: Time-decay scale in days.
        clamp_future: Clamp future timestamps to ``now``.

    Returns:
        Up to ``limit`` scores sorted descending, excluding interacted items.
    """
    affinity = category_affinity(
        catalog, interactions, now=now, decay_days=decay_days, clamp_future=clamp_future
    )
    interacted_ids = {interaction.item_id for interaction in interactions}

    scores = [
        RecommendationScore(
            item_id=item.id,
            score=affinity_score(item, affinity),
            reason=AFFINITY_REASON,
        )
        for item in catalog
        if item.id not in interacted_ids
    ]

    logger.debug(
        "Computed affinity scores",
        extra={"num_candidates": len(scores), "num_categories": len(affinity)},
    )

    return rank_scores(scores, limit)
