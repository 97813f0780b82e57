"""Tests for fallback ranking."""

import pytest

from vibely.recommender.ranking import DEFAULT_LIMIT, rank, score_candidates
from vibely.recommender.scoring import score


@pytest.fixture
def mixed_venues(make_venue):
    """Venues with known study scores: 0, 13, 7, 3, 13, 0."""
    return [
        make_venue(1),
        make_venue(2, budget_tier="₹₹", ambience="Cozy", noise_level="Quiet", work_friendly=True, plug_available=True),
        make_venue(3, budget_tier="₹₹", ambience="Cozy"),
        make_venue(4, noise_level="Quiet"),
        make_venue(5, budget_tier="₹₹", ambience="Cozy", noise_level="Quiet", work_friendly=True, plug_available=True),
        make_venue(6),
    ]


def test_rank_orders_by_descending_score(make_profile, mixed_venues):
    assert rank(make_profile(), mixed_venues) == [2, 5, 3, 4, 1, 6]


def test_rank_keeps_input_order_on_ties(make_profile, mixed_venues):
    """Reversing the input reverses the order among equal scores only."""
    ranked = rank(make_profile(), list(reversed(mixed_venues)))

    assert ranked == [5, 2, 3, 4, 6, 1]


def test_rank_truncates_to_limit(make_profile, mixed_venues):
    assert rank(make_profile(), mixed_venues, limit=2) == [2, 5]


@pytest.mark.parametrize("limit", [1, 3, 6, 10])
def test_rank_length_is_min_of_limit_and_candidates(make_profile, mixed_venues, limit):
    ranked = rank(make_profile(), mixed_venues, limit=limit)

    assert len(ranked) == min(limit, len(mixed_venues))


def test_rank_scores_never_increase(make_profile, mixed_venues):
    profile = make_profile()
    by_id = {v.id: v for v in mixed_venues}

    scores = [score(profile, by_id[vid]) for vid in rank(profile, mixed_venues)]

    assert scores == sorted(scores, reverse=True)


def test_rank_default_limit_is_ten(make_profile, make_venue):
    venues = [make_venue(i) for i in range(1, 16)]

    ranked = rank(make_profile(), venues)

    assert DEFAULT_LIMIT == 10
    assert ranked == list(range(1, 11))


def test_rank_empty_venues_returns_empty(make_profile):
    assert rank(make_profile(), []) == []


@pytest.mark.parametrize("limit", [0, -1, -10])
def test_rank_non_positive_limit_returns_empty(make_profile, mixed_venues, limit):
    assert rank(make_profile(), mixed_venues, limit=limit) == []


def test_score_candidates_reports_scores(make_profile, mixed_venues):
    candidates = score_candidates(make_profile(), mixed_venues)

    assert [(c.venue_id, c.score) for c in candidates[:3]] == [(2, 13), (5, 13), (3, 7)]
    assert len(candidates) == len(mixed_venues)
