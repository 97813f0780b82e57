"""Cafe endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from vibely.api.dependencies import get_service, get_storage
from vibely.exceptions import VenueNotFoundError
from vibely.recommender.models import VenueAttributes, VenueCreate
from vibely.service import RecommendationService
from vibely.storage import InMemoryStorage

# Configure module logger
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/cafes",
    tags=["cafes"],
)


@router.get("", response_model=List[VenueAttributes])
def list_cafes(
    lat: Optional[float] = Query(default=None, description="Center latitude"),
    lng: Optional[float] = Query(default=None, description="Center longitude"),
    radius: Optional[float] = Query(default=None, description="Radius in km"),
    service: RecommendationService = Depends(get_service),
) -> List[VenueAttributes]:
    """List cafes, optionally only those within ``radius`` km of a point.

    The geo filter applies only when ``lat``, ``lng`` and ``radius`` are all
    given.

    Example:
        GET /api/cafes?lat=12.97&lng=77.59&radius=5
    """
    if lat is not None and lng is not None and radius is not None:
        return service.venues_near(lat, lng, radius)
    return service.storage.list_all_venues()


@router.get("/{cafe_id}", response_model=VenueAttributes)
def get_cafe(cafe_id: int, storage: InMemoryStorage = Depends(get_storage)) -> VenueAttributes:
    venue = storage.get_venue(cafe_id)
    if venue is None:
        raise VenueNotFoundError(cafe_id)
    return venue


@router.post("", response_model=VenueAttributes)
def create_cafe(
    data: VenueCreate,
    service: RecommendationService = Depends(get_service),
) -> VenueAttributes:
    """Register a cafe and forward it to the recommendation engine."""
    venue = service.register_venue(data)
    logger.info("Cafe created", extra={"venue_id": venue.id})
    return venue
