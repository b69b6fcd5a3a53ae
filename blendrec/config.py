"""Runtime configuration for BlendRec.

Holds the product taxonomy used for one-hot encoding and the tunable
parameters of the scoring pipeline. Defaults can be overridden through
environment variables so the API and CLI share one source of settings.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence, Tuple

# Configure module logger
logger = logging.getLogger(__name__)

# Storefront taxonomy
DEFAULT_CATEGORIES: Tuple[str, ...] = (
    "Electronics",
    "Food & Beverages",
    "Home & Garden",
    "Pets",
    "Sports & Outdoors",
)
DEFAULT_BRANDS: Tuple[str, ...] = (
    "AudioTech",
    "FitTech",
    "TechPro",
    "BrewMaster",
    "ComfortHome",
    "PetComfort",
    "PhotoPro",
    "RunFast",
)

# Scoring defaults
DEFAULT_CONTENT_WEIGHT = 0.6
DEFAULT_AFFINITY_WEIGHT = 0.4
DEFAULT_DECAY_DAYS = 30.0
DEFAULT_DATA_DIR = "data"
DEFAULT_CACHE_TTL_SECONDS = 30 * 60
DEFAULT_LOG_LEVEL = "INFO"

ENV_PREFIX = "BLENDREC_"


@dataclass(frozen=True)
class Taxonomy:
    """Ordered category and brand enumerations used by the vectorizer.

    The order of each sequence fixes the position of its one-hot column, so
    two vectorizers built from equal taxonomies produce identical vectors.
    """

    categories: Tuple[str, ...] = DEFAULT_CATEGORIES
    brands: Tuple[str, ...] = DEFAULT_BRANDS

    def __post_init__(self):
        # Accept any sequence but store tuples so the value stays hashable
        object.__setattr__(self, "categories", tuple(self.categories))
        object.__setattr__(self, "brands", tuple(self.brands))

        for name, values in (("categories", self.categories), ("brands", self.brands)):
            if len(set(values)) != len(values):
                raise ValueError(f"Taxonomy {name} must not contain duplicates")

    @property
    def dimension(self) -> int:
        """Length of vectors produced for this taxonomy (price and rating included)."""
        return len(self.categories) + len(self.brands) + 2


@dataclass
class RecommenderConfig:
    """Settings for the recommendation pipeline and the service around it.

    Attributes:
        taxonomy: Category and brand enumerations for one-hot encoding.
        content_weight: Weight of content-based scores in the hybrid blend.
        affinity_weight: Weight of affinity scores in the hybrid blend.
        decay_days: Characteristic scale of the interaction time decay.
        clamp_future: If True, interactions stamped in the future decay as if
            they happened now instead of being boosted above their base weight.
        data_dir: Directory holding catalog.csv and interactions.csv.
        cache_ttl_seconds: Lifetime of cached recommendation lists in the API.
        log_level: Root logging level.
    """

    taxonomy: Taxonomy = field(default_factory=Taxonomy)
    content_weight: float = DEFAULT_CONTENT_WEIGHT
    affinity_weight: float = DEFAULT_AFFINITY_WEIGHT
    decay_days: float = DEFAULT_DECAY_DAYS
    clamp_future: bool = False
    data_dir: str = DEFAULT_DATA_DIR
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        if self.decay_days <= 0:
            raise ValueError(f"decay_days must be positive, got {self.decay_days}")
        if self.content_weight < 0 or self.affinity_weight < 0:
            raise ValueError("Hybrid weights must be non-negative")
        if self.cache_ttl_seconds < 0:
            raise ValueError("cache_ttl_seconds must be non-negative")


def _parse_list(value: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_config(environ: Optional[Mapping[str, str]] = None) -> RecommenderConfig:
    """Build a RecommenderConfig from environment variables.

    Recognized variables (all optional):
        BLENDREC_DATA_DIR, BLENDREC_CACHE_TTL, BLENDREC_LOG_LEVEL,
        BLENDREC_CLAMP_FUTURE, BLENDREC_CATEGORIES, BLENDREC_BRANDS.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        Configuration with overrides applied.

    Raises:
        ValueError: If a numeric variable cannot be parsed.
    """
    env = os.environ if environ is None else environ

    def get(name: str) -> Optional[str]:
        return env.get(ENV_PREFIX + name)

    categories: Sequence[str] = DEFAULT_CATEGORIES
    brands: Sequence[str] = DEFAULT_BRANDS
    if get("CATEGORIES"):
        categories = _parse_list(get("CATEGORIES"))
    if get("BRANDS"):
        brands = _parse_list(get("BRANDS"))

    config = RecommenderConfig(
        taxonomy=Taxonomy(categories=categories, brands=brands),
        data_dir=get("DATA_DIR") or DEFAULT_DATA_DIR,
        cache_ttl_seconds=float(get("CACHE_TTL") or DEFAULT_CACHE_TTL_SECONDS),
        log_level=(get("LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        clamp_future=_parse_bool(get("CLAMP_FUTURE") or "false"),
    )

    logger.debug(
        f"Loaded config: data_dir={config.data_dir}, "
        f"vector_dim={config.taxonomy.dimension}, "
        f"cache_ttl={config.cache_ttl_seconds}s"
    )
    return config
