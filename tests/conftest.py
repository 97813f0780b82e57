"""Shared fixtures for the Vibely test suite."""

from typing import Callable

import pytest

from vibely.config import Settings
from vibely.recommender.models import PreferenceProfile, VenueAttributes, VenueCreate

# A venue that matches none of the scoring rules for the default profile
NEUTRAL_VENUE = {
    "name": "Plain Cafe",
    "latitude": 12.9716,
    "longitude": 77.5946,
    "budget_tier": "₹",
    "ambience": "Minimal",
    "noise_level": "Moderate",
    "lighting": "Bright",
    "seating_style": "Communal",
    "work_friendly": False,
    "wifi_quality": "Good",
    "pet_friendly": False,
    "insta_worthiness": "Low",
    "plug_available": False,
}


@pytest.fixture
def make_venue() -> Callable[..., VenueAttributes]:
    """Factory for venues; keyword arguments override the neutral defaults."""

    def _make(venue_id: int = 1, **overrides) -> VenueAttributes:
        fields = dict(NEUTRAL_VENUE)
        fields.update(overrides)
        return VenueAttributes(id=venue_id, **fields)

    return _make


@pytest.fixture
def make_profile() -> Callable[..., PreferenceProfile]:
    """Factory for quiz profiles with a ₹₹ budget and a liking for Cozy cafes."""

    def _make(**overrides) -> PreferenceProfile:
        fields = {
            "budget": "₹₹",
            "desired_ambiences": frozenset({"Cozy"}),
            "mood": "study",
            "wants_pet_friendly": False,
        }
        fields.update(overrides)
        return PreferenceProfile(**fields)

    return _make


@pytest.fixture
def rule_based_settings() -> Settings:
    return Settings(
        _env_file=None,
        RECOMBEE_DATABASE_ID=None,
        RECOMBEE_PRIVATE_TOKEN=None,
        VENUE_SEED_CSV=None,
    )


@pytest.fixture
def personalized_settings() -> Settings:
    return Settings(
        _env_file=None,
        RECOMBEE_DATABASE_ID="vibely-db",
        RECOMBEE_PRIVATE_TOKEN="secret-token",
        PERSONALIZATION_TIMEOUT_SECONDS=0.5,
        VENUE_SEED_CSV=None,
    )


@pytest.fixture
def make_venue_data() -> Callable[..., VenueCreate]:
    """Factory for unregistered venue records."""

    def _make(**overrides) -> VenueCreate:
        fields = dict(NEUTRAL_VENUE)
        fields.update(overrides)
        return VenueCreate(**fields)

    return _make
