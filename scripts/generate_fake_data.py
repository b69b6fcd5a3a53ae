"""Generate a fake catalog and interaction log for testing and development.

Writes ``catalog.csv`` and ``interactions.csv`` in the layout the snapshot
loaders expect.

Example:
    Run the script directly to generate default data:
        $ python scripts/generate_fake_data.py

    Or import and use programmatically:
        from scripts.generate_fake_data import generate_fake_catalog
        catalog_df = generate_fake_catalog(num_items=50)
"""

import random
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from blendrec.config import DEFAULT_BRANDS, DEFAULT_CATEGORIES
from blendrec.recommender.models import InteractionType

# Default configuration constants
DEFAULT_NUM_USERS = 50
DEFAULT_NUM_ITEMS = 100
DEFAULT_NUM_INTERACTIONS = 1000
DEFAULT_DAYS_BACK = 90

TAGS = ["premium", "budget", "eco-friendly", "durable", "portable", "compact", "classic"]

# Views dominate, purchases are rare
INTERACTION_TYPE_WEIGHTS = {
    InteractionType.VIEW: 0.6,
    InteractionType.LIKE: 0.2,
    InteractionType.CART: 0.12,
    InteractionType.PURCHASE: 0.08,
}


def generate_fake_catalog(
    num_items: int = DEFAULT_NUM_ITEMS,
    categories: Sequence[str] = DEFAULT_CATEGORIES,
    brands: Sequence[str] = DEFAULT_BRANDS,
    seed: Optional[int] = None,
) -> pd.DataFrame:
    """Generate a synthetic product catalog.

    Args:
        num_items: Number of items to create. Must be positive.
        categories: Categories to sample from.
        brands: Brands to sample from.
        seed: Optional random seed for reproducibility.

    Returns:
        DataFrame with columns id, name, price, original_price, rating,
        review_count, category, brand, in_stock, tags.

    Raises:
        ValueError: If num_items is not positive.
    """
    if num_items <= 0:
        raise ValueError("num_items must be positive")

    rng = random.Random(seed)
    rows = []
    for idx in range(1, num_items + 1):
        price = round(rng.uniform(5, 500), 2)
        on_sale = rng.random() < 0.3
        category = rng.choice(list(categories))
        rows.append({
            "id": f"p-{idx}",
            "name": f"{category} item {idx}",
            "price": price,
            "original_price": round(price * rng.uniform(1.1, 1.5), 2) if on_sale else None,
            "rating": round(rng.uniform(2.5, 5.0), 1),
            "review_count": rng.randint(0, 2000),
            "category": category,
            "brand": rng.choice(list(brands)),
            "in_stock": rng.random() > 0.1,
            "tags": "|".join(rng.sample(TAGS, rng.randint(1, 3))),
        })

    return pd.DataFrame(rows)


def generate_fake_interactions(
    item_ids: Sequence[str],
    num_users: int = DEFAULT_NUM_USERS,
    num_interactions: int = DEFAULT_NUM_INTERACTIONS,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    seed: Optional[int] = None,
) -> pd.DataFrame:
    """Generate a synthetic interaction log over ``item_ids``.

    Args:
        item_ids: Catalog item identifiers to interact with.
        num_users: Number of unique users to simulate.
        num_interactions: Total number of interaction records.
        start_date: Earliest timestamp. Defaults to 90 days before end_date.
        end_date: Latest timestamp. Defaults to now.
        seed: Optional random seed for reproducibility.

    Returns:
        DataFrame with columns user_id, item_id, interaction_type, timestamp
        (epoch seconds) and rating, sorted by timestamp.

    Raises:
        ValueError: If a count is not positive, item_ids is empty, or
            start_date is not before end_date.
    """
    if num_users <= 0 or num_interactions <= 0:
        raise ValueError("num_users and num_interactions must be positive")
    if not item_ids:
        raise ValueError("item_ids must not be empty")

    if end_date is None:
        end_date = datetime.now()
    if start_date is None:
        start_date = end_date - timedelta(days=DEFAULT_DAYS_BACK)
    if start_date >= end_date:
        raise ValueError("start_date must be before end_date")

    rng = random.Random(seed)
    kinds = list(INTERACTION_TYPE_WEIGHTS)
    kind_weights = list(INTERACTION_TYPE_WEIGHTS.values())
    span_seconds = int((end_date - start_date).total_seconds())

    rows = []
    for _ in range(num_interactions):
        kind = rng.choices(kinds, weights=kind_weights)[0]
        timestamp = start_date + timedelta(seconds=rng.randrange(span_seconds))
        rows.append({
            "user_id": f"u-{rng.randint(1, num_users)}",
            "item_id": rng.choice(list(item_ids)),
            "interaction_type": kind.value,
            "timestamp": timestamp.timestamp(),
            "rating": rng.randint(1, 5) if kind == InteractionType.PURCHASE else None,
        })

    df = pd.DataFrame(rows)
    return df.sort_values("timestamp").reset_index(drop=True)


def main() -> None:
    """Generate default data and save it under data/."""
    print(f"Generating {DEFAULT_NUM_ITEMS} items and {DEFAULT_NUM_INTERACTIONS} interactions...")

    try:
        catalog_df = generate_fake_catalog()
        interactions_df = generate_fake_interactions(catalog_df["id"].tolist())
    except ValueError as e:
        print(f"Error generating data: {e}")
        return

    data_dir = Path(__file__).parent.parent / "data"
    data_dir.mkdir(exist_ok=True)

    catalog_df.to_csv(data_dir / "catalog.csv", index=False)
    interactions_df.to_csv(data_dir / "interactions.csv", index=False)

    print(f"\nData generated successfully!")
    print(f"Saved to: {data_dir}")
    print(f"\nData summary:")
    print(f"  Items: {len(catalog_df)}")
    print(f"  Interactions: {len(interactions_df)}")
    print(f"  Unique users: {interactions_df['user_id'].nunique()}")
    print(f"  Interaction types:\n{interactions_df['interaction_type'].value_counts().to_string()}")


if __name__ == "__main__":
    main()
