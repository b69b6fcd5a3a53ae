"""Recommendation endpoints for the BlendRec API.

This module provides API endpoints for personalized recommendations
(hybrid, content-based, category-affinity) and for similar-item lookups.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from blendrec import __version__
from blendrec.api.cache import RecommendationCache, make_cache_key
from blendrec.api.exceptions import (
    BlendRecException,
    DataLoadError,
    DataNotFoundError,
    InvalidModeError,
    RecommendationError,
)
from blendrec.api.metrics import metrics_service
from blendrec.config import RecommenderConfig, load_config
from blendrec.recommender.hybrid import HybridRecommender
from blendrec.recommender.infer import MODES, recommend_from_snapshot, validate_mode
from blendrec.recommender.models import RecommendationScore
from blendrec.recommender.utils import check_data_exists, load_snapshots

# Configure module logger
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(
    prefix="/recommend",
    tags=["recommendations"],
)

# Loaded lazily so tests can swap configuration before the first request
_config: Optional[RecommenderConfig] = None
_recommender: Optional[HybridRecommender] = None

# Loaded snapshots, keyed by data directory
_data_cache: Dict[str, Dict] = {}
_recommendation_cache: Optional[RecommendationCache] = None


class RecommendationResponse(BaseModel):
    """Response model for recommendation requests."""

    user_id: str = Field(..., description="User ID for recommendations")
    mode: str = Field(..., description="Scoring mode used")
    recommendations: List[RecommendationScore] = Field(
        ..., description="Recommended items, best first"
    )
    cached: bool = Field(default=False, description="Served from the recommendation cache")
    scores: Optional[Dict] = Field(default=None, description="Hybrid score breakdown")
    version: str = Field(default=__version__, description="Service version")


class SimilarItemsResponse(BaseModel):
    """Response model for similar-item requests."""

    item_id: str = Field(..., description="Seed item")
    recommendations: List[RecommendationScore]


def get_config() -> RecommenderConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_recommender() -> HybridRecommender:
    global _recommender
    if _recommender is None:
        _recommender = HybridRecommender(get_config())
    return _recommender


def get_recommendation_cache() -> RecommendationCache:
    global _recommendation_cache
    if _recommendation_cache is None:
        _recommendation_cache = RecommendationCache(ttl_seconds=get_config().cache_ttl_seconds)
    return _recommendation_cache


def reset_state(config: Optional[RecommenderConfig] = None) -> None:
    """Drop loaded data, caches and the recommender, optionally swapping config."""
    global _config, _recommender, _recommendation_cache
    _data_cache.clear()
    _config = config
    _recommender = None
    _recommendation_cache = None


def load_data_if_needed(data_dir: Optional[str] = None) -> Dict:
    """Load catalog and interaction snapshots if not already loaded.

    Uses a module-level cache to avoid re-reading the CSV files on every
    request.

    Args:
        data_dir: Directory containing the snapshots. Defaults to the
            configured data directory.

    Returns:
        Dictionary containing:
            - catalog: List of catalog items
            - interactions: Mapping of user id to interactions
            - loaded_at: ISO timestamp of when the data was loaded

    Raises:
        DataNotFoundError: If the snapshot files are missing.
        DataLoadError: If the snapshot files cannot be parsed.
    """
    data_dir = data_dir or get_config().data_dir

    cached = _data_cache.get(data_dir)
    if cached is not None:
        logger.debug("Using cached data")
        return cached

    if not check_data_exists(data_dir):
        logger.error(f"Data not found in {data_dir}")
        raise DataNotFoundError(data_dir)

    try:
        logger.info(f"Loading data from {data_dir}")
        catalog, interactions = load_snapshots(data_dir)
    except Exception as e:
        logger.error(f"Failed to load data: {e}", exc_info=True)
        raise DataLoadError(data_dir, e) from e

    _data_cache[data_dir] = {
        "catalog": catalog,
        "interactions": interactions,
        "loaded_at": datetime.now(timezone.utc).isoformat(),
    }
    logger.info("Data loaded successfully")
    return _data_cache[data_dir]


def data_status() -> Dict:
    """Summary of the data loaded for the configured directory."""
    data = _data_cache.get(get_config().data_dir)
    if data is None:
        return {
            "data_loaded": False,
            "timestamp_last_loaded": None,
            "num_items": 0,
            "num_users": 0,
        }
    return {
        "data_loaded": True,
        "timestamp_last_loaded": data["loaded_at"],
        "num_items": len(data["catalog"]),
        "num_users": len(data["interactions"]),
    }


@router.get("/similar/{item_id}", response_model=SimilarItemsResponse)
def get_similar_items(
    item_id: str,
    top_n: int = Query(4, ge=1, le=100),
    data_dir: Optional[str] = None,
) -> SimilarItemsResponse:
    """Get the items most similar to ``item_id``.

    An unknown item returns an empty list rather than an error.

    Example:
        GET /recommend/similar/p-42?top_n=4
    """
    data = load_data_if_needed(data_dir)

    start_time = time.time()
    recommendations = get_recommender().similar(data["catalog"], item_id, limit=top_n)
    metrics_service.record_inference((time.time() - start_time) * 1000)

    return SimilarItemsResponse(item_id=item_id, recommendations=recommendations)


@router.get("/{user_id}", response_model=RecommendationResponse)
def get_recommendations(
    user_id: str,
    mode: str = "hybrid",
    top_n: int = Query(10, ge=1, le=100),
    explain: bool = False,
    data_dir: Optional[str] = None,
) -> RecommendationResponse:
    """Get product recommendations for a user.

    Args:
        user_id: User for which to generate recommendations.
        mode: "hybrid" (default), "content" or "collaborative".
        top_n: Number of recommendations to return (default: 10).
        explain: Include the hybrid score breakdown (bypasses the cache).
        data_dir: Directory containing the snapshots.

    Returns:
        RecommendationResponse with the ranked items and their reasons.

    Raises:
        InvalidModeError: If the mode is unknown (400).
        DataNotFoundError: If snapshots are missing (503).
        RecommendationError: If scoring fails (500).

    Example:
        GET /recommend/u-42?mode=hybrid&top_n=5
    """
    logger.info(f"Generating recommendations for user {user_id}, mode={mode}, top_n={top_n}")

    try:
        mode = validate_mode(mode)
    except ValueError:
        raise InvalidModeError(mode, MODES) from None

    data = load_data_if_needed(data_dir)
    interactions = data["interactions"].get(user_id, [])
    cache = get_recommendation_cache()
    cache_key = (data_dir or get_config().data_dir,) + make_cache_key(
        user_id, mode, top_n, interactions
    )

    if not explain:
        cached = cache.get(cache_key)
        metrics_service.record_cache(hit=cached is not None)
        if cached is not None:
            logger.debug(f"Serving cached recommendations for user {user_id}")
            return RecommendationResponse(
                user_id=user_id, mode=mode, recommendations=cached, cached=True
            )

    try:
        start_time = time.time()
        scores = None
        if explain and mode == "hybrid":
            recommendations, scores = get_recommender().recommend(
                data["catalog"], interactions, limit=top_n, return_scores=True
            )
        else:
            recommendations = recommend_from_snapshot(
                data["catalog"],
                interactions,
                top_n=top_n,
                mode=mode,
                recommender=get_recommender(),
            )
        metrics_service.record_inference((time.time() - start_time) * 1000)
    except BlendRecException:
        raise
    except Exception as e:
        logger.error(
            f"Error generating recommendations for user {user_id}: {e}",
            exc_info=True,
        )
        raise RecommendationError(user_id, e) from e

    if not explain:
        cache.set(cache_key, recommendations)

    logger.info(f"Generated {len(recommendations)} recommendations for user {user_id}")

    return RecommendationResponse(
        user_id=user_id,
        mode=mode,
        recommendations=recommendations,
        scores=scores,
    )


@router.post("/reload-data")
def reload_data(data_dir: Optional[str] = None) -> Dict[str, str]:
    """Reload the snapshots from disk.

    Clears the data and recommendation caches, then loads fresh snapshots.
    Useful when the catalog or interaction exports have been refreshed.
    """
    logger.info("Reloading data...")
    _data_cache.clear()
    get_recommendation_cache().clear()

    load_data_if_needed(data_dir)
    return {"status": "Data reloaded successfully"}
