"""Tests for the in-memory storage and venue CSV loading."""

from datetime import datetime, timedelta, timezone

import pandas as pd
import pytest

from vibely.exceptions import InvalidArgumentError
from vibely.recommender.models import InteractionEvent, UserCreate
from vibely.storage import InMemoryStorage, load_venues_csv, seed_storage


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def venue_csv(tmp_path):
    df = pd.DataFrame([
        {
            "name": "Bean There",
            "latitude": 12.97,
            "longitude": 77.59,
            "budget_tier": "₹₹",
            "ambience": "Cozy",
            "noise_level": "Quiet",
            "lighting": "",
            "work_friendly": "true",
            "pet_friendly": "no",
            "plug_available": 1,
            "insta_worthiness": "High",
            "cuisine_tags": "Coffee|Bakery",
        },
        {
            "name": "Brew Lab",
            "latitude": 12.93,
            "longitude": 77.62,
            "budget_tier": "₹₹₹",
            "ambience": "Aesthetic",
            "noise_level": "Social",
            "lighting": "",
            "work_friendly": "false",
            "pet_friendly": "yes",
            "plug_available": 0,
            "insta_worthiness": "Low",
            "cuisine_tags": "",
        },
    ])
    csv_path = tmp_path / "venues.csv"
    df.to_csv(csv_path, index=False)
    return csv_path


# ===== CSV loading =====


def test_load_venues_csv_parses_rows(venue_csv):
    venues = load_venues_csv(str(venue_csv))

    assert [v.name for v in venues] == ["Bean There", "Brew Lab"]
    first, second = venues
    assert first.work_friendly is True
    assert first.pet_friendly is False
    assert first.plug_available is True
    assert first.cuisine_tags == ["Coffee", "Bakery"]
    assert first.lighting == ""
    assert second.pet_friendly is True
    assert second.plug_available is False
    assert second.cuisine_tags == []


def test_load_venues_csv_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_venues_csv(str(tmp_path / "missing.csv"))


def test_load_venues_csv_missing_columns(tmp_path):
    csv_path = tmp_path / "bad.csv"
    pd.DataFrame([{"name": "No Coordinates"}]).to_csv(csv_path, index=False)

    with pytest.raises(ValueError, match="missing required columns"):
        load_venues_csv(str(csv_path))


def test_seed_storage_assigns_ids_in_order(storage, venue_csv):
    venues = seed_storage(storage, load_venues_csv(str(venue_csv)))

    assert [v.id for v in venues] == [1, 2]
    assert storage.get_venue(2).name == "Brew Lab"
    assert [v.id for v in storage.list_all_venues()] == [1, 2]


# ===== Users =====


def test_create_and_get_user(storage):
    user = storage.create_user(UserCreate(email="maya@example.com", name="Maya"))

    assert user.id == 1
    assert user.profile is None
    assert storage.get_user(1) == user
    assert storage.get_user_by_email("maya@example.com") == user


def test_duplicate_email_rejected(storage):
    storage.create_user(UserCreate(email="maya@example.com"))

    with pytest.raises(InvalidArgumentError):
        storage.create_user(UserCreate(email="maya@example.com"))


def test_quiz_profile_is_replaced_wholesale(storage, make_profile):
    storage.create_user(UserCreate(email="maya@example.com"))
    storage.update_user_profile(1, make_profile(mood="work", wants_pet_friendly=True))

    storage.update_user_profile(1, make_profile(mood="date", desired_ambiences=frozenset()))

    profile = storage.get_user_profile(1)
    assert profile.mood == "date"
    assert profile.desired_ambiences == frozenset()
    assert profile.wants_pet_friendly is False


def test_update_profile_unknown_user_returns_none(storage, make_profile):
    assert storage.update_user_profile(99, make_profile()) is None
    assert storage.get_user_profile(99) is None


# ===== Interactions and saved venues =====


def test_interactions_newest_first(storage):
    now = datetime.now(timezone.utc)
    storage.save_interaction(
        InteractionEvent(user_id=1, venue_id=1, interaction_type="view", timestamp=now - timedelta(hours=1))
    )
    storage.save_interaction(InteractionEvent(user_id=1, venue_id=2, interaction_type="save", timestamp=now))
    storage.save_interaction(InteractionEvent(user_id=2, venue_id=3, interaction_type="view", timestamp=now))

    events = storage.get_user_interactions(1)

    assert [e.venue_id for e in events] == [2, 1]


def test_save_and_unsave_venue(storage, make_venue_data):
    storage.create_venue(make_venue_data(name="A"))
    storage.create_venue(make_venue_data(name="B"))

    first = storage.save_venue(1, 2)
    again = storage.save_venue(1, 2)
    storage.save_venue(1, 1)

    assert first == again
    assert [v.name for v in storage.get_user_saved_venues(1)] == ["B", "A"]

    storage.unsave_venue(1, 2)
    storage.unsave_venue(1, 42)

    assert [v.name for v in storage.get_user_saved_venues(1)] == ["A"]
