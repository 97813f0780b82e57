"""CLI script for ranking cafes from quiz answers.

Useful for testing and tuning. Loads cafes from a CSV, optionally keeps only
those near a point, ranks them with the rule-based scorer and prints the
result.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from vibely.exceptions import InvalidArgumentError
from vibely.recommender.geo import select_near
from vibely.recommender.models import Mood, PreferenceProfile, VenueAttributes
from vibely.recommender.ranking import score_candidates
from vibely.storage import load_venues_csv

# Setup logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s"
)
logger = logging.getLogger(__name__)


def rank_from_csv(
    csv_path: str,
    profile: PreferenceProfile,
    top_n: int = 10,
    near: Optional[Tuple[float, float, float]] = None,
) -> List[Tuple[VenueAttributes, int]]:
    """Rank the cafes in a CSV for a profile.

    Args:
        csv_path: Cafe CSV, as written by generate_fake_venues.py
        profile: Quiz answers to score against
        top_n: Number of cafes to return
        near: Optional (lat, lng, radius_km) filter

    Returns:
        List of (cafe, score) pairs, best first
    """
    venues = [
        VenueAttributes(id=i, **v.model_dump())
        for i, v in enumerate(load_venues_csv(csv_path), start=1)
    ]
    if near is not None:
        venues = select_near(venues, *near)

    by_id = {v.id: v for v in venues}
    ranked = score_candidates(profile, venues)[:max(top_n, 0)]
    return [(by_id[c.venue_id], c.score) for c in ranked]


def main() -> None:
    """Main CLI function."""
    parser = argparse.ArgumentParser(
        description="Rank cafes for a set of quiz answers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/recommend_cli.py data/fake_venues.csv --budget ₹₹ --mood study
  python scripts/recommend_cli.py data/fake_venues.csv --mood date --ambience Aesthetic Cozy
  python scripts/recommend_cli.py data/fake_venues.csv --mood work --near 12.97 77.59 3
        """
    )

    parser.add_argument("csv_path", type=str, help="CSV file with cafes")
    parser.add_argument("--budget", type=str, default="₹₹", help="Budget tier (default: ₹₹)")
    parser.add_argument(
        "--ambience",
        nargs="*",
        default=[],
        help="Desired ambience categories",
    )
    parser.add_argument(
        "--mood",
        type=str,
        choices=[m.value for m in Mood],
        default=Mood.HANGOUT.value,
        help="Declared mood (default: hangout)",
    )
    parser.add_argument("--pet-friendly", action="store_true", help="Prefer pet-friendly cafes")
    parser.add_argument(
        "--near",
        nargs=3,
        type=float,
        metavar=("LAT", "LNG", "RADIUS_KM"),
        help="Only consider cafes within RADIUS_KM of LAT, LNG",
    )
    parser.add_argument(
        "--top-n",
        type=int,
        default=10,
        help="Number of cafes to return (default: 10)"
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

    profile = PreferenceProfile(
        budget=args.budget,
        desired_ambiences=frozenset(args.ambience),
        mood=args.mood,
        wants_pet_friendly=args.pet_friendly,
    )

    try:
        ranked = rank_from_csv(
            csv_path=args.csv_path,
            profile=profile,
            top_n=args.top_n,
            near=tuple(args.near) if args.near else None,
        )
    except (FileNotFoundError, ValueError, InvalidArgumentError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"\nTop {len(ranked)} cafes for mood '{args.mood}':")
    for venue, venue_score in ranked:
        print(f"  [{venue_score:>2}] {venue.name or venue.id} ({venue.ambience}, {venue.budget_tier})")
    print()


if __name__ == "__main__":
    main()
