"""Rule-based fallback scorer.

Scores a venue against a quiz profile with a fixed additive point table. Every
applicable rule fires; mood rules come in groups and only the group for the
declared mood applies.
"""

from vibely.recommender.models import (
    Ambience,
    InstaWorthiness,
    Lighting,
    Mood,
    NoiseLevel,
    PreferenceProfile,
    SeatingStyle,
    VenueAttributes,
    WifiQuality,
)

BUDGET_MATCH_POINTS = 3
AMBIENCE_MATCH_POINTS = 4
INSTA_WORTHY_POINTS = 2
PET_FRIENDLY_POINTS = 1


def _study_points(venue: VenueAttributes) -> int:
    points = 0
    if venue.noise_level == NoiseLevel.QUIET:
        points += 3
    if venue.work_friendly:
        points += 2
    if venue.plug_available:
        points += 1
    return points


def _work_points(venue: VenueAttributes) -> int:
    points = 0
    if venue.work_friendly:
        points += 4
    if venue.wifi_quality == WifiQuality.EXCELLENT:
        points += 2
    if venue.plug_available:
        points += 2
    return points


def _date_points(venue: VenueAttributes) -> int:
    points = 0
    if venue.ambience == Ambience.AESTHETIC:
        points += 3
    if venue.lighting == Lighting.MOODY:
        points += 2
    if venue.seating_style == SeatingStyle.BOOTHS:
        points += 1
    return points


def _hangout_points(venue: VenueAttributes) -> int:
    points = 0
    if venue.noise_level == NoiseLevel.SOCIAL:
        points += 2
    if venue.ambience == Ambience.COZY:
        points += 2
    return points


def _mood_points(mood: str, venue: VenueAttributes) -> int:
    if mood == Mood.STUDY:
        return _study_points(venue)
    if mood == Mood.WORK:
        return _work_points(venue)
    if mood == Mood.DATE:
        return _date_points(venue)
    if mood == Mood.HANGOUT:
        return _hangout_points(venue)
    return 0


def score(profile: PreferenceProfile, venue: VenueAttributes) -> int:
    """Compute the affinity score of a venue for a profile.

    Args:
        profile: The user's quiz response.
        venue: The venue to score.

    Returns:
        Non-negative integer score. Unknown moods contribute nothing.

    Example:
        A study profile with a ₹₹ budget who likes Cozy cafes scores a quiet,
        cozy ₹₹ cafe with plugs and work-friendly seating at 3 + 4 + 3 + 2 + 1
        = 13.
    """
    total = 0

    if profile.budget == venue.budget_tier:
        total += BUDGET_MATCH_POINTS
    if venue.ambience in profile.desired_ambiences:
        total += AMBIENCE_MATCH_POINTS

    total += _mood_points(profile.mood, venue)

    if venue.insta_worthiness == InstaWorthiness.HIGH:
        total += INSTA_WORTHY_POINTS
    if venue.pet_friendly and profile.wants_pet_friendly:
        total += PET_FRIENDLY_POINTS

    return total
