"""BlendRec: explainable hybrid product recommendations.

This package ranks a product catalog for a user by blending a content-similarity
model with a category-affinity model over the user's interaction log.

Modules:
    api: FastAPI application and REST API endpoints
    recommender: Vectorization, interaction weighting and scoring logic
    config: Runtime configuration and product taxonomy
"""

__version__ = "0.1.0"
