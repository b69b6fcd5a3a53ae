"""CLI script for getting product recommendations.

Useful for testing and evaluation. Gets recommendations for a user (or items
similar to a product) and prints them to the console.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from blendrec.config import load_config
from blendrec.recommender.hybrid import HybridRecommender
from blendrec.recommender.infer import MODES, recommend_for_user
from blendrec.recommender.models import RecommendationScore
from blendrec.recommender.utils import get_data_paths, load_catalog

# Setup logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s"
)
logger = logging.getLogger(__name__)


def print_recommendations(title: str, recommendations: List[RecommendationScore]) -> None:
    print(f"\n{title}")
    if not recommendations:
        print("  (no recommendations)")
    for rank, rec in enumerate(recommendations, start=1):
        print(f"  {rank:>2}. {rec.item_id:<12} score={rec.score:.4f}  {rec.reason}")
    print()


def main() -> None:
    """Main CLI function."""
    parser = argparse.ArgumentParser(
        description="Get product recommendations for a user",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/predict_cli.py u-42
  python scripts/predict_cli.py u-42 --top-n 5
  python scripts/predict_cli.py u-42 --mode content
  python scripts/predict_cli.py --similar-to p-7
        """
    )

    parser.add_argument(
        "user_id",
        nargs="?",
        help="User ID to get recommendations for"
    )

    parser.add_argument(
        "--top-n",
        type=int,
        default=10,
        help="Number of recommendations to return (default: 10)"
    )

    parser.add_argument(
        "--mode",
        type=str,
        choices=list(MODES),
        default="hybrid",
        help="Recommendation mode (default: hybrid)"
    )

    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Directory containing catalog.csv and interactions.csv"
    )

    parser.add_argument(
        "--similar-to",
        type=str,
        default=None,
        metavar="ITEM_ID",
        help="Show items similar to this product instead of user recommendations"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    if not args.user_id and not args.similar_to:
        parser.error("either user_id or --similar-to is required")

    config = load_config()
    data_dir = args.data_dir or config.data_dir

    try:
        if args.similar_to:
            catalog_path, _ = get_data_paths(data_dir)
            catalog = load_catalog(str(catalog_path))
            recommendations = HybridRecommender(config).similar(
                catalog, args.similar_to, limit=args.top_n
            )
            print_recommendations(f"Items similar to {args.similar_to}:", recommendations)
            return

        recommendations = recommend_for_user(
            user_id=args.user_id,
            data_dir=data_dir,
            top_n=args.top_n,
            mode=args.mode,
            config=config,
        )
    except FileNotFoundError as e:
        print(f"Error: Data not found in {data_dir}", file=sys.stderr)
        print(f"  {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print_recommendations(
        f"Recommendations for user {args.user_id} (mode: {args.mode}):", recommendations
    )


if __name__ == "__main__":
    main()
