"""User, quiz and saved-cafe endpoints."""

import logging
from typing import Dict, List

from fastapi import APIRouter, Depends

from vibely.api.dependencies import get_service, get_storage
from vibely.exceptions import UserNotFoundError, VenueNotFoundError
from vibely.recommender.models import (
    InteractionEvent,
    PreferenceProfile,
    SavedVenue,
    User,
    UserCreate,
    VenueAttributes,
)
from vibely.service import RecommendationService
from vibely.storage import InMemoryStorage

# Configure module logger
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
)


def _require_user(storage: InMemoryStorage, user_id: int) -> User:
    user = storage.get_user(user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


@router.post("", response_model=User)
def create_user(
    data: UserCreate,
    service: RecommendationService = Depends(get_service),
) -> User:
    """Register a user and forward it to the recommendation engine."""
    user = service.register_user(data)
    logger.info("User created", extra={"user_id": user.id})
    return user


@router.get("/{user_id}", response_model=User)
def get_user(user_id: int, storage: InMemoryStorage = Depends(get_storage)) -> User:
    return _require_user(storage, user_id)


@router.post("/{user_id}/quiz", response_model=User)
def submit_quiz(
    user_id: int,
    profile: PreferenceProfile,
    service: RecommendationService = Depends(get_service),
) -> User:
    """Replace the user's quiz answers.

    The whole profile is overwritten; fields are not merged with a previous
    submission.
    """
    user = service.submit_quiz(user_id, profile)
    logger.info("Quiz submitted", extra={"user_id": user_id, "mood": profile.mood})
    return user


@router.get("/{user_id}/interactions", response_model=List[InteractionEvent])
def get_user_interactions(
    user_id: int,
    storage: InMemoryStorage = Depends(get_storage),
) -> List[InteractionEvent]:
    """List a user's interactions, newest first."""
    _require_user(storage, user_id)
    return storage.get_user_interactions(user_id)


@router.post("/{user_id}/saved-cafes/{cafe_id}", response_model=SavedVenue)
def save_cafe(
    user_id: int,
    cafe_id: int,
    storage: InMemoryStorage = Depends(get_storage),
) -> SavedVenue:
    _require_user(storage, user_id)
    if storage.get_venue(cafe_id) is None:
        raise VenueNotFoundError(cafe_id)
    return storage.save_venue(user_id, cafe_id)


@router.delete("/{user_id}/saved-cafes/{cafe_id}")
def unsave_cafe(
    user_id: int,
    cafe_id: int,
    storage: InMemoryStorage = Depends(get_storage),
) -> Dict[str, bool]:
    storage.unsave_venue(user_id, cafe_id)
    return {"success": True}


@router.get("/{user_id}/saved-cafes", response_model=List[VenueAttributes])
def get_saved_cafes(
    user_id: int,
    storage: InMemoryStorage = Depends(get_storage),
) -> List[VenueAttributes]:
    _require_user(storage, user_id)
    return storage.get_user_saved_venues(user_id)
