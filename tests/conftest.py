"""Shared fixtures for BlendRec tests."""

import sys
from pathlib import Path

import pandas as pd
import pytest

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from blendrec.recommender.models import Interaction, InteractionType, Item

# Fixed reference time so decay is reproducible
NOW = 1_700_000_000.0
DAY = 86400.0


def make_item(item_id, category="Electronics", brand="TechPro", price=100.0, rating=4.0, review_count=10, **kwargs):
    return Item(
        id=item_id,
        name=kwargs.pop("name", f"Item {item_id}"),
        price=price,
        rating=rating,
        review_count=review_count,
        category=category,
        brand=brand,
        **kwargs,
    )


def make_interaction(item_id, kind=InteractionType.VIEW, days_ago=0.0, rating=None):
    return Interaction(
        item_id=item_id,
        interaction_type=kind,
        timestamp=NOW - days_ago * DAY,
        rating=rating,
    )


CATALOG_ROWS = [
    ("p-1", "Noise Cancelling Headphones", 199.99, "Electronics", "TechPro", 4.5, 120),
    ("p-2", "Bluetooth Speaker", 89.0, "Electronics", "AudioTech", 4.2, 300),
    ("p-3", "Mirrorless Camera", 549.0, "Electronics", "PhotoPro", 4.8, 75),
    ("p-4", "Memory Foam Pillow", 45.0, "Home & Garden", "ComfortHome", 4.0, 40),
    ("p-5", "Pour Over Kettle", 129.0, "Home & Garden", "BrewMaster", 4.6, 210),
    ("p-6", "Orthopedic Dog Bed", 35.5, "Pets", "PetComfort", 4.3, 95),
    ("p-7", "Trail Running Shoes", 110.0, "Sports & Outdoors", "RunFast", 4.1, 180),
    ("p-8", "Fitness Tracker", 79.0, "Sports & Outdoors", "FitTech", 3.9, 60),
    ("p-9", "Single Origin Beans", 15.0, "Food & Beverages", "BrewMaster", 4.7, 500),
    ("p-10", "Mystery Box", 0.0, "Pets", "Acme", 3.5, 0),
]


@pytest.fixture
def catalog():
    """Ten-item catalog covering every default category."""
    return [
        make_item(item_id, name=name, price=price, category=category, brand=brand, rating=rating, review_count=reviews)
        for item_id, name, price, category, brand, rating, reviews in CATALOG_ROWS
    ]


@pytest.fixture
def data_dir(tmp_path):
    """Data directory with catalog.csv and interactions.csv."""
    catalog_df = pd.DataFrame(
        CATALOG_ROWS,
        columns=["id", "name", "price", "category", "brand", "rating", "review_count"],
    )
    catalog_df["original_price"] = [249.99] + [None] * (len(catalog_df) - 1)
    catalog_df["in_stock"] = [True] * (len(catalog_df) - 1) + [False]
    catalog_df["tags"] = ["audio|wireless"] + [""] * (len(catalog_df) - 1)
    catalog_df.to_csv(tmp_path / "catalog.csv", index=False)

    interactions_df = pd.DataFrame(
        [
            ("u-1", "p-1", "purchase", NOW - 1 * DAY, 5),
            ("u-1", "p-2", "view", NOW - 2 * DAY, None),
            ("u-1", "p-7", "like", NOW - 3 * DAY, None),
            ("u-2", "p-9", "view", NOW - 1 * DAY, None),
            ("u-3", "p-missing", "cart", NOW - 1 * DAY, None),
        ],
        columns=["user_id", "item_id", "interaction_type", "timestamp", "rating"],
    )
    interactions_df.to_csv(tmp_path / "interactions.csv", index=False)

    return tmp_path
