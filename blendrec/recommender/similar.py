"""Similar-item lookup.

Ranks catalog items by feature-vector similarity to a seed item,
independently of any user.
"""

import logging
from typing import List, Optional, Sequence

from blendrec.recommender.embed import CatalogEmbeddings, FeatureVectorizer
from blendrec.recommender.models import Item, RecommendationScore
from blendrec.recommender.utils import rank_scores

# Configure module logger
logger = logging.getLogger(__name__)

SIMILAR_REASON = "Similar products"
DEFAULT_SIMILAR_LIMIT = 4


def similar_items(
    catalog: Sequence[Item],
    item_id: str,
    limit: int = DEFAULT_SIMILAR_LIMIT,
    vectorizer: Optional[FeatureVectorizer] = None,
    embeddings: Optional[CatalogEmbeddings] = None,
) -> List[RecommendationScore]:
    """Find the items most similar to ``item_id``.

    An unknown seed yields an empty list rather than an error; callers that
    need to tell "no similar items" from "unknown seed" should check catalog
    membership themselves.
    """
    if embeddings is None:
        embeddings = CatalogEmbeddings(catalog, vectorizer)

    seed_vector = embeddings.get_embedding(item_id)
    if seed_vector is None:
        logger.warning(f"Item {item_id} not found in catalog")
        return []

    candidates = embeddings.scored_items(seed_vector, exclude_ids={item_id})
    scores = [
        RecommendationScore(item_id=item.id, score=similarity, reason=SIMILAR_REASON)
        for item, similarity in candidates
    ]
    return rank_scores(scores, limit)
