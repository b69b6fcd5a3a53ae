"""Hybrid recommendation module.

Combines content-based and category-affinity recommendations.
"""

import logging
import time
from typing import Dict, List, Optional, Sequence, Tuple, Union

from blendrec.config import RecommenderConfig
from blendrec.recommender.affinity import collaborative_recommendations
from blendrec.recommender.content import content_based_recommendations
from blendrec.recommender.embed import CatalogEmbeddings, FeatureVectorizer
from blendrec.recommender.models import Interaction, Item, RecommendationScore
from blendrec.recommender.similar import DEFAULT_SIMILAR_LIMIT, similar_items
from blendrec.recommender.utils import rank_scores

# Configure module logger
logger = logging.getLogger(__name__)

HYBRID_REASON = "Based on preferences and popularity"
DEFAULT_TOP_N = 10
# Each source contributes this many times ``limit`` candidates
CANDIDATE_POOL_FACTOR = 2


def combine_scores(
    content_scores: Sequence[RecommendationScore],
    affinity_scores: Sequence[RecommendationScore],
    content_weight: float,
    affinity_weight: float,
    limit: int,
) -> List[RecommendationScore]:
    """Fuse two ranked lists into one, deduplicated by item.

    Content candidates enter first with their own reason. An affinity
    candidate already present adds to that entry and switches its reason to
    the combined one; otherwise it is added with its own reason.
    """
    combined: Dict[str, RecommendationScore] = {}

    for rec in content_scores:
        combined[rec.item_id] = RecommendationScore(
            item_id=rec.item_id,
            score=rec.score * content_weight,
            reason=rec.reason,
        )

    for rec in affinity_scores:
        existing = combined.get(rec.item_id)
        if existing is not None:
            combined[rec.item_id] = RecommendationScore(
                item_id=rec.item_id,
                score=existing.score + rec.score * affinity_weight,
                reason=HYBRID_REASON,
            )
        else:
            combined[rec.item_id] = RecommendationScore(
                item_id=rec.item_id,
                score=rec.score * affinity_weight,
                reason=rec.reason,
            )

    return rank_scores(combined.values(), limit)


class HybridRecommender:
    """Combines content-based and affinity recommendations.

    Holds configuration only; every method is a pure function of the catalog
    and interaction snapshots passed in, so one instance can serve many
    requests concurrently.
    """

    def __init__(self, config: Optional[RecommenderConfig] = None):
        self.config = config or RecommenderConfig()
        self.vectorizer = FeatureVectorizer(self.config.taxonomy)
        self.content_weight = self.config.content_weight
        self.affinity_weight = self.config.affinity_weight

        # Normalize weights
        total_weight = self.content_weight + self.affinity_weight
        if total_weight > 0:
            self.content_weight = self.content_weight / total_weight
            self.affinity_weight = self.affinity_weight / total_weight

        logger.info(
            f"Initialized HybridRecommender: "
            f"Content weight={self.content_weight:.2f}, "
            f"Affinity weight={self.affinity_weight:.2f}, "
            f"vector_dim={self.vectorizer.dimension}"
        )

    def _decay_kwargs(self) -> Dict:
        return {
            "decay_days": self.config.decay_days,
            "clamp_future": self.config.clamp_future,
        }

    def embed_catalog(self, catalog: Sequence[Item]) -> CatalogEmbeddings:
        """Vectorize a catalog snapshot once for reuse across scorers."""
        return CatalogEmbeddings(catalog, self.vectorizer)

    def content_based(
        self,
        catalog: Sequence[Item],
        interactions: Sequence[Interaction],
        limit: int = DEFAULT_TOP_N,
        now: Optional[float] = None,
        embeddings: Optional[CatalogEmbeddings] = None,
    ) -> List[RecommendationScore]:
        """Content-based recommendations for one user."""
        return content_based_recommendations(
            catalog,
            interactions,
            limit=limit,
            now=now,
            vectorizer=self.vectorizer,
            embeddings=embeddings,
            **self._decay_kwargs(),
        )

    def collaborative(
        self,
        catalog: Sequence[Item],
        interactions: Sequence[Interaction],
        limit: int = DEFAULT_TOP_N,
        now: Optional[float] = None,
    ) -> List[RecommendationScore]:
        """Category-affinity recommendations for one user."""
        return collaborative_recommendations(
            catalog, interactions, limit=limit, now=now, **self._decay_kwargs()
        )

    def similar(
        self,
        catalog: Sequence[Item],
        item_id: str,
        limit: int = DEFAULT_SIMILAR_LIMIT,
    ) -> List[RecommendationScore]:
        """Items most similar to ``item_id``."""
        return similar_items(catalog, item_id, limit=limit, vectorizer=self.vectorizer)

    def recommend(
        self,
        catalog: Sequence[Item],
        interactions: Sequence[Interaction],
        limit: int = DEFAULT_TOP_N,
        now: Optional[float] = None,
        return_scores: bool = False,
    ) -> Union[List[RecommendationScore], Tuple[List[RecommendationScore], Dict]]:
        """Get hybrid recommendations for a user.

        Pulls ``2 * limit`` candidates from each scorer so enough overlap
        survives the weighting, then blends them.

        With an empty interaction log the content side is the popularity
        fallback, scored as ``rating * ln(review_count + 1)`` (roughly 0 to
        30) rather than a cosine in [-1, 1]. Those scores dominate the
        affinity side, and items found by both sources are still labelled
        with the combined reason even though the user has no preferences.
        Callers that need a cold-start label should check for an empty log
        themselves.

        Args:
            catalog: Catalog snapshot.
            interactions: The user's interaction log.
            limit: Maximum number of results.
            now: Reference epoch time in seconds; fixed once for both scorers.
            return_scores: Also return a per-item score breakdown.

        Returns:
            Ranked recommendations, or a tuple of (recommendations, breakdown)
            when ``return_scores`` is set.
        """
        if now is None:
            now = time.time()

        logger.info(f"Generating hybrid recommendations, limit={limit}")

        pool_size = limit * CANDIDATE_POOL_FACTOR
        embeddings = self.embed_catalog(catalog)
        content_scores = self.content_based(
            catalog, interactions, limit=pool_size, now=now, embeddings=embeddings
        )
        affinity_scores = self.collaborative(catalog, interactions, limit=pool_size, now=now)

        recommendations = combine_scores(
            content_scores,
            affinity_scores,
            content_weight=self.content_weight,
            affinity_weight=self.affinity_weight,
            limit=limit,
        )

        logger.info(f"Generated {len(recommendations)} hybrid recommendations")

        if return_scores:
            content_by_id = {rec.item_id: rec.score for rec in content_scores}
            affinity_by_id = {rec.item_id: rec.score for rec in affinity_scores}
            score_breakdown = {
                "content_scores": {rec.item_id: content_by_id.get(rec.item_id, 0.0) for rec in recommendations},
                "affinity_scores": {rec.item_id: affinity_by_id.get(rec.item_id, 0.0) for rec in recommendations},
                "hybrid_scores": {rec.item_id: rec.score for rec in recommendations},
                "content_weight": self.content_weight,
                "affinity_weight": self.affinity_weight,
            }
            return recommendations, score_breakdown

        return recommendations


def hybrid_recommendations(
    catalog: Sequence[Item],
    interactions: Sequence[Interaction],
    limit: int = DEFAULT_TOP_N,
    now: Optional[float] = None,
    config: Optional[RecommenderConfig] = None,
) -> List[RecommendationScore]:
    """Hybrid recommendations with a one-off recommender."""
    return HybridRecommender(config).recommend(catalog, interactions, limit=limit, now=now)
