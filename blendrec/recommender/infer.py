"""Module for getting recommendations.

Loads catalog and interaction snapshots and dispatches to the scorer
selected by the recommendation mode.
"""

import logging
import time
from typing import Dict, List, Optional, Sequence

from joblib import Parallel, delayed

from blendrec.config import DEFAULT_DATA_DIR, RecommenderConfig
from blendrec.recommender.hybrid import HybridRecommender
from blendrec.recommender.models import Interaction, Item, RecommendationScore
from blendrec.recommender.utils import load_snapshots

# Configure module logger
logger = logging.getLogger(__name__)

# Default parameters
DEFAULT_TOP_N = 5
DEFAULT_MODE = "hybrid"
MODES = ("hybrid", "content", "collaborative")


def validate_mode(mode: str) -> str:
    """Normalize and check a recommendation mode.

    Raises:
        ValueError: If the mode is not one of hybrid, content, collaborative.
    """
    normalized = (mode or "").strip().lower()
    if normalized not in MODES:
        raise ValueError(f"Unknown recommendation mode '{mode}'. Expected one of {MODES}")
    return normalized


def recommend_from_snapshot(
    catalog: Sequence[Item],
    interactions: Sequence[Interaction],
    top_n: int = DEFAULT_TOP_N,
    mode: str = DEFAULT_MODE,
    now: Optional[float] = None,
    recommender: Optional[HybridRecommender] = None,
) -> List[RecommendationScore]:
    """Score an in-memory snapshot with the chosen mode.

    Args:
        catalog: Catalog snapshot.
        interactions: The user's interactions.
        top_n: Number of recommendations to return.
        mode: One of "hybrid", "content", "collaborative".
        now: Reference epoch time in seconds.
        recommender: Recommender to use; a default one is built if omitted.

    Returns:
        Ranked recommendations.

    Raises:
        ValueError: If the mode is unknown.
    """
    mode = validate_mode(mode)
    recommender = recommender or HybridRecommender()

    if mode == "content":
        return recommender.content_based(catalog, interactions, limit=top_n, now=now)
    if mode == "collaborative":
        return recommender.collaborative(catalog, interactions, limit=top_n, now=now)
    return recommender.recommend(catalog, interactions, limit=top_n, now=now)


def recommend_for_user(
    user_id: str,
    data_dir: str = DEFAULT_DATA_DIR,
    top_n: int = DEFAULT_TOP_N,
    mode: str = DEFAULT_MODE,
    now: Optional[float] = None,
    config: Optional[RecommenderConfig] = None,
) -> List[RecommendationScore]:
    """Get recommendations for a user.

    Loads the snapshots from ``data_dir`` and returns the top N items. Users
    with no interactions get the popularity fallback.
    """
    start_time = time.time()

    logger.info(
        "Starting recommendation generation",
        extra={
            "user_id": user_id,
            "top_n": top_n,
            "mode": mode,
            "data_dir": data_dir,
        },
    )

    try:
        mode = validate_mode(mode)

        # Load snapshots
        load_start = time.time()
        catalog, interactions_by_user = load_snapshots(data_dir)
        load_time = time.time() - load_start

        logger.info(
            "Snapshots loaded",
            extra={
                "user_id": user_id,
                "load_time_ms": round(load_time * 1000, 2),
                "num_users": len(interactions_by_user),
                "num_items": len(catalog),
            },
        )

        user_interactions = interactions_by_user.get(user_id, [])
        if not user_interactions:
            logger.warning(
                "User has no interactions, using popularity fallback",
                extra={"user_id": user_id, "strategy": "popular"},
            )

        scoring_start = time.time()
        recommendations = recommend_from_snapshot(
            catalog,
            user_interactions,
            top_n=top_n,
            mode=mode,
            now=now,
            recommender=HybridRecommender(config),
        )
        scoring_time = time.time() - scoring_start
        total_time = time.time() - start_time

        logger.info(
            "Recommendations generated",
            extra={
                "user_id": user_id,
                "num_recommendations": len(recommendations),
                "scoring_time_ms": round(scoring_time * 1000, 2),
                "total_time_ms": round(total_time * 1000, 2),
            },
        )

        return recommendations

    except FileNotFoundError as e:
        logger.error(
            "Snapshot files not found",
            extra={
                "user_id": user_id,
                "data_dir": data_dir,
                "error": str(e),
            },
        )
        raise
    except Exception as e:
        total_time = time.time() - start_time
        logger.error(
            "Recommendation generation failed",
            extra={
                "user_id": user_id,
                "error": str(e),
                "error_type": type(e).__name__,
                "total_time_ms": round(total_time * 1000, 2),
            },
        )
        raise ValueError(f"Failed to generate recommendations: {e}") from e


def batch_recommend_for_users(
    user_ids: List[str],
    data_dir: str = DEFAULT_DATA_DIR,
    top_n: int = DEFAULT_TOP_N,
    mode: str = DEFAULT_MODE,
    n_jobs: int = 4,
    now: Optional[float] = None,
    config: Optional[RecommenderConfig] = None,
) -> Dict[str, List[RecommendationScore]]:
    """Generate recommendations for multiple users in batch.

    Loads the snapshots once and scores users on worker threads. Scoring is
    pure, so the workers share the catalog without any locking.

    Args:
        user_ids: Users for which to generate recommendations.
        data_dir: Directory holding catalog.csv and interactions.csv.
        top_n: Number of recommendations per user.
        mode: One of "hybrid", "content", "collaborative".
        n_jobs: Number of worker threads.
        now: Reference epoch time in seconds, shared by every user.
        config: Recommender configuration.

    Returns:
        Mapping of user id to that user's recommendations. A user whose
        scoring fails maps to an empty list.

    Raises:
        FileNotFoundError: If snapshot files are not found in ``data_dir``.
        ValueError: If the mode is unknown.
    """
    logger.info(
        f"Generating batch recommendations for {len(user_ids)} users, "
        f"top_n={top_n}, mode={mode}"
    )

    mode = validate_mode(mode)
    if now is None:
        now = time.time()

    try:
        catalog, interactions_by_user = load_snapshots(data_dir)
    except FileNotFoundError as e:
        logger.error(f"Snapshot files not found: {e}")
        raise

    recommender = HybridRecommender(config)

    def score_user(user_id: str) -> List[RecommendationScore]:
        try:
            return recommend_from_snapshot(
                catalog,
                interactions_by_user.get(user_id, []),
                top_n=top_n,
                mode=mode,
                now=now,
                recommender=recommender,
            )
        except Exception as e:
            logger.error(f"Failed to generate recommendations for user {user_id}: {e}")
            return []

    results = Parallel(n_jobs=n_jobs, prefer="threads")(
        delayed(score_user)(user_id) for user_id in user_ids
    )

    logger.info(f"Batch recommendations completed for {len(user_ids)} users")

    return dict(zip(user_ids, results))
