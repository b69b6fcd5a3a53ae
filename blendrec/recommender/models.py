"""Data models shared by the scoring pipeline and the API.

Items and interactions are immutable snapshots handed in by the catalog and
interaction-log collaborators; recommendation scores are produced fresh on
every call.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class InteractionType(str, Enum):
    """Kinds of user interaction, in increasing order of intent."""

    VIEW = "view"
    LIKE = "like"
    CART = "cart"
    PURCHASE = "purchase"


class Item(BaseModel):
    """A catalog product eligible for recommendation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique, stable item identifier")
    name: str = ""
    price: float = Field(..., description="Current price; non-positive values are data errors")
    original_price: Optional[float] = None
    rating: float = Field(0.0, ge=0.0, le=5.0)
    review_count: int = Field(0, ge=0)
    category: str = ""
    brand: str = ""
    in_stock: bool = True
    tags: Tuple[str, ...] = ()
    description: str = ""


class Interaction(BaseModel):
    """A single timestamped user action on an item."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    interaction_type: InteractionType
    timestamp: float = Field(..., allow_inf_nan=False, description="Epoch time in seconds")
    rating: Optional[float] = Field(None, ge=0.0, le=5.0)


class RecommendationScore(BaseModel):
    """A ranked recommendation with a user-facing explanation."""

    item_id: str = Field(..., description="Recommended item identifier")
    score: float = Field(..., description="Relevance score; higher is better")
    reason: str = Field(..., description="Explanation shown to the user")
