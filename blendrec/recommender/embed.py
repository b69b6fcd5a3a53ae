"""Item feature vectors for content-based recommendations.

Turns catalog items into fixed-length numeric vectors (one-hot category,
one-hot brand, dampened price, normalized rating) and computes cosine
similarity between them.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity as _pairwise_cosine

from blendrec.config import Taxonomy
from blendrec.recommender.models import Item

# Configure module logger
logger = logging.getLogger(__name__)

# Feature scaling constants
PRICE_LOG_SCALE = 10.0
MAX_RATING = 5.0


class FeatureVectorizer:
    """Maps items to vectors over a fixed taxonomy.

    The vector layout is ``[categories..., brands..., price, rating]``.
    Unknown categories or brands encode as all-zero blocks.
    """

    def __init__(self, taxonomy: Optional[Taxonomy] = None):
        self.taxonomy = taxonomy or Taxonomy()
        self._category_index = {c: i for i, c in enumerate(self.taxonomy.categories)}
        self._brand_offset = len(self.taxonomy.categories)
        self._brand_index = {b: i for i, b in enumerate(self.taxonomy.brands)}

    @property
    def dimension(self) -> int:
        return self.taxonomy.dimension

    def zeros(self) -> np.ndarray:
        """Return the all-zero vector of this vectorizer's length."""
        return np.zeros(self.dimension, dtype=np.float64)

    def vectorize(self, item: Item) -> np.ndarray:
        """Build the feature vector for a single item.

        A non-positive price is treated as a data error: the price feature is
        left at 0 and the item is still vectorized.

        Args:
            item: Catalog item to encode.

        Returns:
            1-D array of length ``dimension``.
        """
        vector = self.zeros()

        category_idx = self._category_index.get(item.category)
        if category_idx is not None:
            vector[category_idx] = 1.0

        brand_idx = self._brand_index.get(item.brand)
        if brand_idx is not None:
            vector[self._brand_offset + brand_idx] = 1.0

        if item.price > 0:
            vector[-2] = math.log(item.price) / PRICE_LOG_SCALE
        else:
            logger.warning(
                "Non-positive price, price feature set to 0",
                extra={"item_id": item.id, "price": item.price},
            )

        vector[-1] = item.rating / MAX_RATING
        return vector

    def vectorize_catalog(self, items: Sequence[Item]) -> np.ndarray:
        """Vectorize a catalog into a matrix with one row per item, in order."""
        if not items:
            return np.zeros((0, self.dimension), dtype=np.float64)
        return np.vstack([self.vectorize(item) for item in items])


def cosine_similarity(vector_a: np.ndarray, vector_b: np.ndarray) -> float:
    """Cosine similarity of two vectors, defined as 0 if either is all-zero."""
    norm_a = np.linalg.norm(vector_a)
    norm_b = np.linalg.norm(vector_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(vector_a, vector_b) / (norm_a * norm_b))


def cosine_similarities(vector: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Cosine similarity of one vector against every row of a matrix.

    Zero rows (and a zero query vector) yield 0 rather than NaN.
    """
    if matrix.shape[0] == 0:
        return np.zeros(0, dtype=np.float64)
    return _pairwise_cosine(vector.reshape(1, -1), matrix)[0]


class CatalogEmbeddings:
    """Feature vectors for a whole catalog snapshot.

    Vectorizes each item once so repeated lookups and similarity queries
    don't re-encode the catalog.
    """

    def __init__(self, items: Sequence[Item], vectorizer: Optional[FeatureVectorizer] = None):
        self.items = list(items)
        self.vectorizer = vectorizer or FeatureVectorizer()
        self.embeddings = self.vectorizer.vectorize_catalog(self.items)
        self.item_id_to_idx: Dict[str, int] = {item.id: idx for idx, item in enumerate(self.items)}

        logger.debug(
            f"Initialized CatalogEmbeddings: {len(self.items)} items, "
            f"embedding_dim={self.vectorizer.dimension}"
        )

    def __len__(self) -> int:
        return len(self.items)

    def get_item(self, item_id: str) -> Optional[Item]:
        idx = self.item_id_to_idx.get(item_id)
        return None if idx is None else self.items[idx]

    def get_embedding(self, item_id: str) -> Optional[np.ndarray]:
        """Get the vector for an item, or None if it isn't in the catalog."""
        idx = self.item_id_to_idx.get(item_id)
        if idx is None:
            return None
        return self.embeddings[idx]

    def compute_similarity(self, item_id1: str, item_id2: str) -> Optional[float]:
        """Get similarity between two catalog items."""
        emb1 = self.get_embedding(item_id1)
        emb2 = self.get_embedding(item_id2)

        if emb1 is None or emb2 is None:
            return None

        return cosine_similarity(emb1, emb2)

    def similarities_to(self, vector: np.ndarray) -> np.ndarray:
        """Similarity of every catalog item to ``vector``, in catalog order."""
        return cosine_similarities(vector, self.embeddings)

    def scored_items(
        self,
        vector: np.ndarray,
        exclude_ids: Optional[set] = None,
    ) -> List[Tuple[Item, float]]:
        """Pair each non-excluded item with its similarity to ``vector``."""
        exclude_ids = exclude_ids or set()
        similarities = self.similarities_to(vector)
        return [
            (item, float(similarities[idx]))
            for idx, item in enumerate(self.items)
            if item.id not in exclude_ids
        ]
