"""Generate fake cafe data for testing and development.

Creates a CSV of synthetic cafes scattered around a city center, in the
format read by ``vibely.storage.load_venues_csv``.

Example:
    Run the script directly to generate default data:
        $ python scripts/generate_fake_venues.py

    Or import and use programmatically:
        from scripts.generate_fake_venues import generate_fake_venues
        df = generate_fake_venues(num_venues=50)
"""

import random
from pathlib import Path
from typing import Optional

import pandas as pd

# Default configuration constants
DEFAULT_NUM_VENUES = 100
DEFAULT_CENTER_LAT = 12.9716
DEFAULT_CENTER_LNG = 77.5946
DEFAULT_SPREAD_DEGREES = 0.08

BUDGET_TIERS = ["₹", "₹₹", "₹₹₹"]
AMBIENCES = ["Cozy", "Aesthetic", "Minimal", "Rustic", "Industrial"]
NOISE_LEVELS = ["Quiet", "Moderate", "Social"]
LIGHTING = ["Bright", "Natural", "Moody"]
SEATING_STYLES = ["Booths", "Communal", "Couches", "Outdoor"]
WIFI_QUALITY = ["Poor", "Good", "Excellent"]
INSTA_WORTHINESS = ["Low", "Medium", "High"]
CUISINES = ["Coffee", "Bakery", "Brunch", "Desserts", "Vegan", "Continental"]


def generate_fake_venues(
    num_venues: int = DEFAULT_NUM_VENUES,
    center_lat: float = DEFAULT_CENTER_LAT,
    center_lng: float = DEFAULT_CENTER_LNG,
    spread_degrees: float = DEFAULT_SPREAD_DEGREES,
    random_seed: Optional[int] = None,
) -> pd.DataFrame:
    """Generate synthetic cafes.

    Args:
        num_venues: Number of cafes to generate. Must be positive.
        center_lat: Latitude the cafes are scattered around.
        center_lng: Longitude the cafes are scattered around.
        spread_degrees: Maximum offset from the center in degrees.
        random_seed: Seed for reproducible output.

    Returns:
        DataFrame with one row per cafe. List columns are ``|``-separated.

    Raises:
        ValueError: If ``num_venues`` is not positive.
    """
    if num_venues <= 0:
        raise ValueError("num_venues must be positive")

    rng = random.Random(random_seed)

    venues = []
    for i in range(1, num_venues + 1):
        venues.append({
            "name": f"Cafe {i}",
            "address": f"{rng.randint(1, 200)} Main Road",
            "latitude": round(center_lat + rng.uniform(-spread_degrees, spread_degrees), 6),
            "longitude": round(center_lng + rng.uniform(-spread_degrees, spread_degrees), 6),
            "budget_tier": rng.choice(BUDGET_TIERS),
            "ambience": rng.choice(AMBIENCES),
            "noise_level": rng.choice(NOISE_LEVELS),
            "lighting": rng.choice(LIGHTING),
            "seating_style": rng.choice(SEATING_STYLES),
            "work_friendly": rng.random() < 0.5,
            "wifi_quality": rng.choice(WIFI_QUALITY),
            "pet_friendly": rng.random() < 0.3,
            "insta_worthiness": rng.choice(INSTA_WORTHINESS),
            "plug_available": rng.random() < 0.6,
            "cuisine_tags": "|".join(rng.sample(CUISINES, k=2)),
        })

    return pd.DataFrame(venues)


def main() -> None:
    """Generate fake cafes and save them to data/fake_venues.csv."""
    print(f"Generating {DEFAULT_NUM_VENUES} fake cafes...")

    try:
        df = generate_fake_venues()
    except ValueError as e:
        print(f"Error generating data: {e}")
        return

    data_dir = Path(__file__).parent.parent / 'data'
    data_dir.mkdir(exist_ok=True)

    output_path = data_dir / 'fake_venues.csv'
    df.to_csv(output_path, index=False)

    print(f"\nData generated successfully!")
    print(f"Saved to: {output_path}")
    print(f"\nData preview:")
    print(df.head(10))
    print(f"\nData summary:")
    print(f"  Total cafes: {len(df)}")
    print(f"  Ambiences: {df['ambience'].value_counts().to_dict()}")
    print(f"  Work friendly: {int(df['work_friendly'].sum())}")


if __name__ == '__main__':
    main()
