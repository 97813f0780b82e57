"""Recommendation endpoints for the Vibely API.

This module provides the personalized cafe recommendation endpoint. Results
come from the active engine when it has an opinion and from the rule-based
scorer otherwise.
"""

import logging
import time
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from vibely.api.dependencies import get_app_settings, get_service
from vibely.api.metrics import metrics_service
from vibely.config import Settings
from vibely.recommender.models import ScoredCandidate, VenueAttributes
from vibely.service import GeoQuery, RecommendationService

# Configure module logger
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(
    prefix="/api/users",
    tags=["recommendations"],
)


class RecommendationResponse(BaseModel):
    """Response model for recommendation requests.

    Attributes:
        user_id: The user the recommendations were generated for.
        source: "personalized", "fallback" or "empty".
        recommendations: Recommended cafes, best first.
        scores: Fallback scores of the recommended cafes, when requested.
    """

    user_id: int = Field(..., description="User ID for recommendations")
    source: str = Field(..., description="Where the recommendations came from")
    recommendations: List[VenueAttributes] = Field(
        ..., description="Recommended cafes, best first"
    )
    scores: Optional[List[ScoredCandidate]] = Field(
        default=None, description="Fallback scores when explain=true"
    )


@router.get("/{user_id}/recommendations", response_model=RecommendationResponse)
def get_recommendations(
    user_id: int,
    count: Optional[int] = Query(default=None, description="Number of cafes to return"),
    lat: Optional[float] = Query(default=None, description="Center latitude"),
    lng: Optional[float] = Query(default=None, description="Center longitude"),
    radius: Optional[float] = Query(default=None, description="Radius in km"),
    explain: bool = Query(default=False, description="Include fallback scores"),
    service: RecommendationService = Depends(get_service),
    settings: Settings = Depends(get_app_settings),
) -> RecommendationResponse:
    """Get cafe recommendations for a user.

    Args:
        user_id: User to recommend for.
        count: Number of cafes (default from settings, capped at
            ``MAX_RECOMMENDATION_COUNT``).
        lat: Optional center latitude for a geo filter.
        lng: Optional center longitude for a geo filter.
        radius: Optional radius in km for a geo filter.
        explain: Include per-cafe fallback scores.

    Returns:
        RecommendationResponse with the recommended cafes.

    Raises:
        UserNotFoundError: If the user does not exist.
        InvalidArgumentError: If count is below 1 or radius is negative.

    Example:
        GET /api/users/42/recommendations?count=5
    """
    start_time = time.time()

    if count is None:
        count = settings.DEFAULT_RECOMMENDATION_COUNT
    count = min(count, settings.MAX_RECOMMENDATION_COUNT)

    near = None
    if lat is not None and lng is not None and radius is not None:
        near = GeoQuery(latitude=lat, longitude=lng, radius_km=radius)

    result = service.recommend_venues(user_id, count=count, near=near, explain=explain)

    latency_ms = (time.time() - start_time) * 1000
    metrics_service.record_recommendation(result.source, latency_ms)

    return RecommendationResponse(
        user_id=user_id,
        source=result.source,
        recommendations=result.venues,
        scores=result.scores,
    )
