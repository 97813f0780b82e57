"""Geo-proximity filtering of venues.

Distances use the haversine great-circle formula on a sphere of radius
6371 km. Coordinates are not validated here; out-of-range values produce a
distance rather than an error.
"""

import logging
import math
from typing import List, Sequence

import numpy as np

from vibely.exceptions import InvalidArgumentError
from vibely.recommender.models import VenueAttributes

# Configure module logger
logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometers between two points in degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lng2 - lng1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    # Floating error can push a just outside [0, 1]
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def _distances_km(
    latitudes: np.ndarray,
    longitudes: np.ndarray,
    center_lat: float,
    center_lng: float,
) -> np.ndarray:
    """Vectorized haversine distances from a center to many points."""
    phi1 = np.radians(center_lat)
    phi2 = np.radians(latitudes)
    dphi = np.radians(latitudes - center_lat)
    dlmb = np.radians(longitudes - center_lng)

    a = np.sin(dphi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlmb / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    return 2 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(a))


def select_near(
    venues: Sequence[VenueAttributes],
    center_lat: float,
    center_lng: float,
    radius_km: float,
) -> List[VenueAttributes]:
    """Select the venues within ``radius_km`` of a center point.

    The boundary is inclusive, so a radius of 0 keeps only venues at exactly
    the center. Input order is preserved.

    Args:
        venues: Candidate venues.
        center_lat: Center latitude in degrees.
        center_lng: Center longitude in degrees.
        radius_km: Search radius in kilometers.

    Returns:
        Venues whose distance to the center is at most ``radius_km``.

    Raises:
        InvalidArgumentError: If ``radius_km`` is negative or NaN.
    """
    if math.isnan(radius_km) or radius_km < 0:
        raise InvalidArgumentError("radius_km", radius_km, "must be a non-negative number")

    if not venues:
        return []

    latitudes = np.array([v.latitude for v in venues], dtype=np.float64)
    longitudes = np.array([v.longitude for v in venues], dtype=np.float64)
    distances = _distances_km(latitudes, longitudes, center_lat, center_lng)

    nearby = [venue for venue, d in zip(venues, distances) if d <= radius_km]

    logger.debug(
        "Geo filter applied",
        extra={
            "center_lat": center_lat,
            "center_lng": center_lng,
            "radius_km": radius_km,
            "num_candidates": len(venues),
            "num_selected": len(nearby),
        },
    )

    return nearby
