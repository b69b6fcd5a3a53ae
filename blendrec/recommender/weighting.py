"""Interaction weighting.

Converts an interaction into a scalar that reflects how strong the user's
intent was (view < like < cart < purchase) and how recently it happened.
"""

import math
import time
from typing import Dict, Optional

from blendrec.config import DEFAULT_DECAY_DAYS
from blendrec.recommender.models import Interaction, InteractionType

SECONDS_PER_DAY = 86400

# Base weight per interaction kind; order must stay strictly increasing
BASE_WEIGHTS: Dict[InteractionType, float] = {
    InteractionType.VIEW: 1.0,
    InteractionType.LIKE: 3.0,
    InteractionType.CART: 5.0,
    InteractionType.PURCHASE: 10.0,
}


def base_weight(interaction_type) -> float:
    """Look up the intent weight for an interaction kind.

    Raises:
        ValueError: If the kind is not one of view, like, cart, purchase.
    """
    return BASE_WEIGHTS[InteractionType(interaction_type)]


def time_decay(
    days_since: float,
    decay_days: float = DEFAULT_DECAY_DAYS,
    clamp_future: bool = False,
) -> float:
    """Exponential recency factor ``exp(-days_since / decay_days)``.

    Negative ``days_since`` (a timestamp in the future) gives a factor above 1
    unless ``clamp_future`` is set.
    """
    if clamp_future and days_since < 0:
        days_since = 0.0
    return math.exp(-days_since / decay_days)


def interaction_weight(
    interaction: Interaction,
    now: Optional[float] = None,
    decay_days: float = DEFAULT_DECAY_DAYS,
    clamp_future: bool = False,
) -> float:
    """Weight of one interaction at time ``now``.

    Args:
        interaction: The interaction to weigh.
        now: Reference epoch time in seconds. Defaults to the current time.
        decay_days: Characteristic scale of the time decay, in days.
        clamp_future: Treat future timestamps as happening at ``now``.

    Returns:
        ``base_weight * time_decay``; non-negative.
    """
    if now is None:
        now = time.time()
    days_since = (now - interaction.timestamp) / SECONDS_PER_DAY
    return base_weight(interaction.interaction_type) * time_decay(
        days_since, decay_days=decay_days, clamp_future=clamp_future
    )
