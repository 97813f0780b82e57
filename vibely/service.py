"""Recommendation service.

Glues storage, the geo filter and the active recommendation engine together
for the request handlers. Personalized results win when the engine has an
opinion; otherwise venues are ranked from the user's quiz profile.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

from vibely.exceptions import InvalidArgumentError, UserNotFoundError
from vibely.recommender.engine import RecommendationEngine
from vibely.recommender.geo import select_near
from vibely.recommender.models import (
    InteractionEvent,
    PreferenceProfile,
    ScoredCandidate,
    User,
    UserCreate,
    VenueAttributes,
    VenueCreate,
)
from vibely.recommender.ranking import DEFAULT_LIMIT, score_candidates
from vibely.storage import InMemoryStorage

# Configure module logger
logger = logging.getLogger(__name__)

SOURCE_PERSONALIZED = "personalized"
SOURCE_FALLBACK = "fallback"
SOURCE_EMPTY = "empty"


class GeoQuery(NamedTuple):
    latitude: float
    longitude: float
    radius_km: float


@dataclass
class RecommendationResult:
    """Outcome of a recommendation request.

    Attributes:
        venue_ids: Recommended venue ids, best first.
        venues: The resolved venue records, in the same order.
        source: "personalized", "fallback" or "empty".
        scores: Fallback scores of the returned venues, when requested.
    """

    venue_ids: List[int]
    venues: List[VenueAttributes] = field(default_factory=list)
    source: str = SOURCE_EMPTY
    scores: Optional[List[ScoredCandidate]] = None


class RecommendationService:
    """Entry point used by the API for recommendation-related operations."""

    def __init__(self, storage: InMemoryStorage, engine: RecommendationEngine):
        self.storage = storage
        self.engine = engine

    def register_user(self, data: UserCreate) -> User:
        user = self.storage.create_user(data)
        self.engine.register_user(user)
        return user

    def submit_quiz(self, user_id: int, profile: PreferenceProfile) -> User:
        """Replace a user's quiz profile and forward it to the engine."""
        user = self.storage.update_user_profile(user_id, profile)
        if user is None:
            raise UserNotFoundError(user_id)
        self.engine.register_user(user)
        return user

    def register_venue(self, data: VenueCreate) -> VenueAttributes:
        venue = self.storage.create_venue(data)
        self.engine.register_venue(venue)
        return venue

    def venues_near(self, latitude: float, longitude: float, radius_km: float) -> List[VenueAttributes]:
        return select_near(self.storage.list_all_venues(), latitude, longitude, radius_km)

    def ingest_interaction(self, event: InteractionEvent) -> None:
        """Store an interaction and pass it to the engine. Never raises."""
        try:
            self.storage.save_interaction(event)
            self.engine.record_interaction(event)
        except Exception as e:
            logger.error(
                "Failed to ingest interaction",
                extra={
                    "user_id": event.user_id,
                    "venue_id": event.venue_id,
                    "interaction_type": event.interaction_type,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )

    def get_recommendations(self, user_id: int, count: int = DEFAULT_LIMIT) -> List[int]:
        """Return recommended venue ids for a user.

        Args:
            user_id: User to recommend for.
            count: Maximum number of ids. Must be at least 1.

        Returns:
            Personalized ids when the engine has an opinion, otherwise ids
            ranked from the user's quiz profile. Empty when the user has no
            profile and the engine has no opinion.

        Raises:
            InvalidArgumentError: If ``count`` is less than 1.
            UserNotFoundError: If the user does not exist.
        """
        return self.recommend_venues(user_id, count).venue_ids

    def recommend_venues(
        self,
        user_id: int,
        count: int = DEFAULT_LIMIT,
        near: Optional[GeoQuery] = None,
        explain: bool = False,
    ) -> RecommendationResult:
        """Recommend venues for a user, resolved to full records.

        Args:
            user_id: User to recommend for.
            count: Maximum number of venues. Must be at least 1.
            near: Optional geo filter narrowing the candidate pool.
            explain: Attach fallback scores to fallback results.

        Raises:
            InvalidArgumentError: If ``count`` is less than 1 or the geo
                radius is negative or NaN.
            UserNotFoundError: If the user does not exist.
        """
        if count < 1:
            raise InvalidArgumentError("count", count, "must be at least 1")
        if self.storage.get_user(user_id) is None:
            raise UserNotFoundError(user_id)

        start_time = time.time()

        pool: Optional[List[VenueAttributes]] = None
        if near is not None:
            pool = select_near(
                self.storage.list_all_venues(), near.latitude, near.longitude, near.radius_km
            )

        source = SOURCE_PERSONALIZED
        scores: Optional[List[ScoredCandidate]] = None
        venue_ids = self._personalized_ids(user_id, count)

        if venue_ids and pool is not None:
            allowed = {v.id for v in pool}
            venue_ids = [vid for vid in venue_ids if vid in allowed]

        if not venue_ids:
            profile = self.storage.get_user_profile(user_id)
            if profile is None:
                source = SOURCE_EMPTY
            else:
                source = SOURCE_FALLBACK
                candidates = pool if pool is not None else self.storage.list_all_venues()
                venue_ids = self.engine.fallback_recommend(profile, candidates, count)
                if explain:
                    scores = score_candidates(profile, candidates)[: len(venue_ids)]

        venues = []
        for venue_id in venue_ids:
            venue = self.storage.get_venue(venue_id)
            if venue is not None:
                venues.append(venue)

        logger.info(
            "Recommendations generated",
            extra={
                "user_id": user_id,
                "source": source,
                "num_recommendations": len(venue_ids),
                "total_time_ms": round((time.time() - start_time) * 1000, 2),
            },
        )

        return RecommendationResult(
            venue_ids=venue_ids,
            venues=venues,
            source=source,
            scores=scores,
        )

    def _personalized_ids(self, user_id: int, count: int) -> List[int]:
        try:
            return list(self.engine.recommend(user_id, count))
        except Exception as e:
            logger.error(
                "Personalized recommendation failed, using fallback",
                extra={"user_id": user_id, "engine": self.engine.name, "error": str(e)},
                exc_info=True,
            )
            return []
