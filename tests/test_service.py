"""Tests for the recommendation service boundary."""

import pytest

from vibely.exceptions import InvalidArgumentError, UserNotFoundError
from vibely.recommender.engine import PersonalizedEngine, RuleBasedEngine
from vibely.recommender.models import InteractionEvent, UserCreate
from vibely.service import (
    SOURCE_EMPTY,
    SOURCE_FALLBACK,
    SOURCE_PERSONALIZED,
    GeoQuery,
    RecommendationService,
)
from vibely.storage import InMemoryStorage


class FixedEngine(RuleBasedEngine):
    """Engine with a fixed personalized opinion."""

    def __init__(self, venue_ids):
        super().__init__()
        self.venue_ids = venue_ids

    def recommend(self, user_id, count=10):
        return self.venue_ids[:count]


class ExplodingEngine(RuleBasedEngine):
    def recommend(self, user_id, count=10):
        raise RuntimeError("engine crashed")

    def record_interaction(self, event):
        raise RuntimeError("engine crashed")


@pytest.fixture
def storage(make_venue_data):
    storage = InMemoryStorage()
    # Study scores for the default profile: 0, 13, 7
    storage.create_venue(make_venue_data(name="Plain"))
    storage.create_venue(
        make_venue_data(
            name="Study Den",
            budget_tier="₹₹",
            ambience="Cozy",
            noise_level="Quiet",
            work_friendly=True,
            plug_available=True,
            latitude=13.5,
            longitude=78.0,
        )
    )
    storage.create_venue(make_venue_data(name="Cozy Corner", budget_tier="₹₹", ambience="Cozy"))
    storage.create_user(UserCreate(email="quiz@example.com"))
    storage.create_user(UserCreate(email="noquiz@example.com"))
    return storage


@pytest.fixture
def service(storage, make_profile):
    service = RecommendationService(storage, RuleBasedEngine())
    service.submit_quiz(1, make_profile())
    return service


def test_fallback_used_when_engine_has_no_opinion(service):
    assert service.get_recommendations(1) == [2, 3, 1]


def test_fallback_count_limits_results(service):
    assert service.get_recommendations(1, count=2) == [2, 3]


def test_no_profile_and_no_opinion_returns_empty(service):
    result = service.recommend_venues(2)

    assert result.venue_ids == []
    assert result.source == SOURCE_EMPTY


def test_unknown_user_raises(service):
    with pytest.raises(UserNotFoundError):
        service.get_recommendations(42)


def test_unknown_user_raises_even_when_engine_has_opinion(storage):
    service = RecommendationService(storage, FixedEngine([1, 2]))

    with pytest.raises(UserNotFoundError):
        service.recommend_venues(42)


def test_personalized_results_win(storage, make_profile):
    service = RecommendationService(storage, FixedEngine([3, 1]))
    service.submit_quiz(1, make_profile())

    result = service.recommend_venues(1)

    assert result.source == SOURCE_PERSONALIZED
    assert result.venue_ids == [3, 1]
    assert [v.name for v in result.venues] == ["Cozy Corner", "Plain"]


def test_personalized_results_without_profile(storage):
    service = RecommendationService(storage, FixedEngine([2]))

    assert service.get_recommendations(2) == [2]


def test_engine_failure_falls_back(storage, make_profile):
    service = RecommendationService(storage, ExplodingEngine())
    service.submit_quiz(1, make_profile())

    result = service.recommend_venues(1)

    assert result.source == SOURCE_FALLBACK
    assert result.venue_ids == [2, 3, 1]


@pytest.mark.parametrize("count", [0, -3])
def test_non_positive_count_rejected(service, count):
    with pytest.raises(InvalidArgumentError):
        service.get_recommendations(1, count=count)


def test_geo_filter_narrows_fallback_pool(service):
    near = GeoQuery(latitude=12.9716, longitude=77.5946, radius_km=2)

    result = service.recommend_venues(1, near=near)

    assert result.venue_ids == [3, 1]


def test_geo_filter_drops_far_personalized_ids(storage, make_profile):
    service = RecommendationService(storage, FixedEngine([2, 3]))
    service.submit_quiz(1, make_profile())
    near = GeoQuery(latitude=12.9716, longitude=77.5946, radius_km=2)

    result = service.recommend_venues(1, near=near)

    assert result.source == SOURCE_PERSONALIZED
    assert result.venue_ids == [3]


def test_negative_radius_rejected(service):
    with pytest.raises(InvalidArgumentError):
        service.recommend_venues(1, near=GeoQuery(12.97, 77.59, -1))


def test_explain_attaches_scores(service):
    result = service.recommend_venues(1, count=2, explain=True)

    assert [(s.venue_id, s.score) for s in result.scores] == [(2, 13), (3, 7)]


def test_missing_venues_are_skipped_when_resolving(storage):
    service = RecommendationService(storage, FixedEngine([99, 2]))

    result = service.recommend_venues(1)

    assert result.venue_ids == [99, 2]
    assert [v.id for v in result.venues] == [2]


def test_submit_quiz_unknown_user(service, make_profile):
    with pytest.raises(UserNotFoundError):
        service.submit_quiz(42, make_profile())


def test_submit_quiz_forwards_user_to_engine(storage, make_profile):
    engine = PersonalizedEngine()
    engine.initialize()
    service = RecommendationService(storage, engine)

    service.submit_quiz(1, make_profile(mood="work"))

    assert engine.snapshot().users[1].profile.mood == "work"


def test_register_venue_forwards_to_engine(storage, make_venue_data):
    engine = PersonalizedEngine()
    engine.initialize()
    service = RecommendationService(storage, engine)

    venue = service.register_venue(make_venue_data(name="New Spot"))

    assert venue.id == 4
    assert engine.snapshot().venues[4].name == "New Spot"


def test_ingest_interaction_stores_and_forwards(storage):
    engine = PersonalizedEngine()
    engine.initialize()
    service = RecommendationService(storage, engine)

    service.ingest_interaction(InteractionEvent(user_id=1, venue_id=2, interaction_type="save"))

    assert len(storage.get_user_interactions(1)) == 1
    assert engine.stats()["num_interactions"] == 1


def test_ingest_interaction_never_raises(storage):
    service = RecommendationService(storage, ExplodingEngine())

    service.ingest_interaction(InteractionEvent(user_id=1, venue_id=2, interaction_type="view"))

    assert len(storage.get_user_interactions(1)) == 1


def test_venues_near(service):
    assert [v.id for v in service.venues_near(12.9716, 77.5946, 2)] == [1, 3]
