"""Utility functions for the recommendation system.

This module provides helpers for loading catalog and interaction snapshots
from CSV files and for ranking scored candidates. The scoring functions
themselves never touch the filesystem; these loaders are the collaborator
that feeds them.
"""

import logging
import math
from collections import OrderedDict
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import pandas as pd

from blendrec.recommender.models import (
    Interaction,
    InteractionType,
    Item,
    RecommendationScore,
)

# Configure module logger
logger = logging.getLogger(__name__)

# Snapshot filenames
CATALOG_FILENAME = "catalog.csv"
INTERACTIONS_FILENAME = "interactions.csv"

CATALOG_COLUMNS = {"id", "name", "price", "rating", "review_count", "category", "brand"}
INTERACTION_COLUMNS = {"user_id", "item_id", "interaction_type", "timestamp"}
TAG_SEPARATOR = "|"


def rank_scores(scores: Iterable[RecommendationScore], limit: int) -> List[RecommendationScore]:
    """Sort scores descending and keep the first ``limit``.

    The sort is stable, so candidates with equal scores keep the order they
    were given in (catalog order for every scorer).
    """
    if limit <= 0:
        return []
    ranked = sorted(scores, key=lambda s: s.score, reverse=True)
    return ranked[:limit]


def _optional(value):
    """Map pandas missing values (NaN/None) to None."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def _split_tags(value) -> Tuple[str, ...]:
    value = _optional(value)
    if not value:
        return ()
    return tuple(tag.strip() for tag in str(value).split(TAG_SEPARATOR) if tag.strip())


def _to_bool(value) -> bool:
    value = _optional(value)
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y"}
    return bool(value)


def load_catalog(csv_path: str) -> List[Item]:
    """Load a catalog snapshot from CSV.

    Expected columns: id, name, price, rating, review_count, category, brand,
    and optionally original_price, in_stock, tags (``|``-separated) and
    description.

    Args:
        csv_path: Path to the catalog CSV file.

    Returns:
        Items in file order.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
        ValueError: If required columns are missing, the file is empty, or
            item identifiers are duplicated.
    """
    csv_file = Path(csv_path)
    if not csv_file.exists():
        raise FileNotFoundError(f"Catalog file not found: {csv_path}")

    logger.info(f"Loading catalog from {csv_path}")
    df = pd.read_csv(csv_file, dtype={"id": str, "category": str, "brand": str})

    if not CATALOG_COLUMNS.issubset(df.columns):
        missing = CATALOG_COLUMNS - set(df.columns)
        raise ValueError(f"Catalog CSV missing required columns: {missing}")

    if df.empty:
        raise ValueError("Cannot load empty catalog")

    duplicated = df["id"][df["id"].duplicated()].unique().tolist()
    if duplicated:
        raise ValueError(f"Duplicate item ids in catalog: {duplicated}")

    items = []
    for row in df.to_dict(orient="records"):
        items.append(
            Item(
                id=row["id"],
                name=_optional(row.get("name")) or "",
                price=float(row["price"]),
                original_price=_optional(row.get("original_price")),
                rating=float(row["rating"]),
                review_count=int(row["review_count"]),
                category=_optional(row.get("category")) or "",
                brand=_optional(row.get("brand")) or "",
                in_stock=_to_bool(row.get("in_stock")),
                tags=_split_tags(row.get("tags")),
                description=_optional(row.get("description")) or "",
            )
        )

    logger.info(f"Loaded {len(items)} catalog items")
    return items


def _timestamps_to_epoch(series: pd.Series) -> pd.Series:
    """Convert a timestamp column to epoch seconds.

    Numeric columns are taken as epoch seconds already; anything else is
    parsed as datetimes.
    """
    if pd.api.types.is_numeric_dtype(series):
        return series.astype(float)
    parsed = pd.to_datetime(series, utc=True)
    return (parsed - pd.Timestamp(0, tz="UTC")).dt.total_seconds()


def _bad_rows(series: pd.Series) -> List[int]:
    """Line numbers (header is line 1) of missing or non-finite values."""
    bad = series.isna() | series.isin([math.inf, -math.inf])
    return [int(idx) + 2 for idx in series.index[bad]]


def load_interactions(csv_path: str) -> Dict[str, List[Interaction]]:
    """Load an interaction log and group it by user.

    Expected columns: user_id, item_id, interaction_type, timestamp, and
    optionally rating. Duplicate (item, kind) rows are kept; each one counts
    separately when weighting.

    Args:
        csv_path: Path to the interactions CSV file.

    Returns:
        Mapping of user id to that user's interactions in file order.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
        ValueError: If required columns are missing or an interaction kind is
            not one of view, like, cart, purchase, or a timestamp is
            missing or not finite.
    """
    csv_file = Path(csv_path)
    if not csv_file.exists():
        raise FileNotFoundError(f"Interactions file not found: {csv_path}")

    logger.info(f"Loading interactions from {csv_path}")
    df = pd.read_csv(
        csv_file,
        dtype={"user_id": str, "item_id": str, "interaction_type": str},
    )

    if not INTERACTION_COLUMNS.issubset(df.columns):
        missing = INTERACTION_COLUMNS - set(df.columns)
        raise ValueError(f"Interactions CSV missing required columns: {missing}")

    known_types = {t.value for t in InteractionType}
    unknown = set(df["interaction_type"].dropna().unique()) - known_types
    if unknown or df["interaction_type"].isna().any():
        raise ValueError(f"Unknown interaction types in log: {sorted(unknown) or ['<missing>']}")

    if df["timestamp"].isna().any():
        raise ValueError(f"Missing timestamps on lines {_bad_rows(df['timestamp'])} of {csv_path}")

    df["timestamp"] = _timestamps_to_epoch(df["timestamp"])
    bad_lines = _bad_rows(df["timestamp"])
    if bad_lines:
        raise ValueError(f"Invalid timestamps on lines {bad_lines} of {csv_path}")

    interactions_by_user: Dict[str, List[Interaction]] = OrderedDict()
    for row in df.to_dict(orient="records"):
        rating = _optional(row.get("rating"))
        interaction = Interaction(
            item_id=row["item_id"],
            interaction_type=row["interaction_type"],
            timestamp=float(row["timestamp"]),
            rating=None if rating is None else float(rating),
        )
        interactions_by_user.setdefault(row["user_id"], []).append(interaction)

    logger.info(f"Loaded {len(df)} interaction records")
    logger.info(f"Unique users: {len(interactions_by_user)}")

    return interactions_by_user


def get_data_paths(data_dir: str) -> Tuple[Path, Path]:
    """Get file paths for the catalog and interaction snapshots.

    Args:
        data_dir: Directory holding the snapshot files.

    Returns:
        A tuple of (catalog path, interactions path).
    """
    data_path = Path(data_dir)
    return data_path / CATALOG_FILENAME, data_path / INTERACTIONS_FILENAME


def check_data_exists(data_dir: str) -> bool:
    """Check that both snapshot files exist in ``data_dir``."""
    catalog_path, interactions_path = get_data_paths(data_dir)
    return catalog_path.exists() and interactions_path.exists()


def load_snapshots(data_dir: str) -> Tuple[List[Item], Dict[str, List[Interaction]]]:
    """Load the catalog and interaction log from a data directory.

    Raises:
        FileNotFoundError: If the directory or either file is missing.
    """
    data_path = Path(data_dir)
    if not data_path.exists():
        raise FileNotFoundError(f"Data directory does not exist: {data_dir}")

    catalog_path, interactions_path = get_data_paths(data_dir)
    catalog = load_catalog(str(catalog_path))
    interactions = load_interactions(str(interactions_path))
    return catalog, interactions
