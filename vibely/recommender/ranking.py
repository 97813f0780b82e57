"""Ranking of candidate venues by fallback score."""

import logging
from typing import List, Sequence

from vibely.recommender.models import PreferenceProfile, ScoredCandidate, VenueAttributes
from vibely.recommender.scoring import score

# Configure module logger
logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10


def score_candidates(
    profile: PreferenceProfile,
    venues: Sequence[VenueAttributes],
) -> List[ScoredCandidate]:
    """Score every venue, best first.

    The sort is stable, so venues with equal scores keep their input order.
    """
    scored = [ScoredCandidate(venue_id=v.id, score=score(profile, v)) for v in venues]
    return sorted(scored, key=lambda c: c.score, reverse=True)


def rank(
    profile: PreferenceProfile,
    venues: Sequence[VenueAttributes],
    limit: int = DEFAULT_LIMIT,
) -> List[int]:
    """Rank venues for a profile and return the top ``limit`` venue ids.

    Args:
        profile: The user's quiz response.
        venues: Candidate venues, in the order ties should be resolved.
        limit: Maximum number of ids to return. Zero or negative yields [].

    Returns:
        Venue ids ordered by descending score.
    """
    if limit <= 0 or not venues:
        return []

    ranked = [c.venue_id for c in score_candidates(profile, venues)[:limit]]

    logger.debug(
        "Ranked venues with fallback scorer",
        extra={"num_candidates": len(venues), "limit": limit, "num_ranked": len(ranked)},
    )

    return ranked
