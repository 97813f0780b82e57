"""Storage for users, venues, interactions and saved venues.

The recommendation core only needs :class:`VenueStorage`. The in-memory
implementation backs the API and the tests; venues can be seeded from a CSV
file.
"""

import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence

import pandas as pd

from vibely.exceptions import InvalidArgumentError
from vibely.recommender.models import (
    InteractionEvent,
    PreferenceProfile,
    SavedVenue,
    User,
    UserCreate,
    VenueAttributes,
    VenueCreate,
)

# Configure module logger
logger = logging.getLogger(__name__)

REQUIRED_VENUE_COLUMNS = {"latitude", "longitude", "budget_tier", "ambience", "noise_level"}
BOOL_VENUE_COLUMNS = ("work_friendly", "pet_friendly", "plug_available")
LIST_VENUE_COLUMNS = ("photos", "cuisine_tags")
LIST_SEPARATOR = "|"


class VenueStorage(Protocol):
    """Lookups the recommendation service needs from storage."""

    def list_all_venues(self) -> List[VenueAttributes]:
        ...

    def get_venue(self, venue_id: int) -> Optional[VenueAttributes]:
        ...

    def get_user_profile(self, user_id: int) -> Optional[PreferenceProfile]:
        ...


class InMemoryStorage:
    """Thread-safe in-process storage."""

    def __init__(self):
        self._lock = threading.Lock()
        self._users: Dict[int, User] = {}
        self._venues: Dict[int, VenueAttributes] = {}
        self._interactions: List[InteractionEvent] = []
        self._saved: Dict[int, Dict[int, SavedVenue]] = {}
        self._next_user_id = 1
        self._next_venue_id = 1

    # Users

    def create_user(self, data: UserCreate) -> User:
        with self._lock:
            if any(u.email == data.email for u in self._users.values()):
                raise InvalidArgumentError("email", data.email, "already registered")
            user = User(id=self._next_user_id, email=data.email, name=data.name)
            self._users[user.id] = user
            self._next_user_id += 1
        return user

    def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            return next((u for u in self._users.values() if u.email == email), None)

    def update_user_profile(self, user_id: int, profile: PreferenceProfile) -> Optional[User]:
        """Replace a user's quiz profile. Returns None for unknown users."""
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            user = user.model_copy(update={"profile": profile})
            self._users[user_id] = user
        return user

    def get_user_profile(self, user_id: int) -> Optional[PreferenceProfile]:
        user = self._users.get(user_id)
        return user.profile if user is not None else None

    # Venues

    def create_venue(self, data: VenueCreate) -> VenueAttributes:
        with self._lock:
            venue = VenueAttributes(id=self._next_venue_id, **data.model_dump())
            self._venues[venue.id] = venue
            self._next_venue_id += 1
        return venue

    def list_all_venues(self) -> List[VenueAttributes]:
        with self._lock:
            return list(self._venues.values())

    def get_venue(self, venue_id: int) -> Optional[VenueAttributes]:
        return self._venues.get(venue_id)

    # Interactions

    def save_interaction(self, event: InteractionEvent) -> InteractionEvent:
        with self._lock:
            self._interactions.append(event)
        return event

    def get_user_interactions(self, user_id: int) -> List[InteractionEvent]:
        """Interactions of a user, newest first."""
        with self._lock:
            events = [e for e in self._interactions if e.user_id == user_id]
        return sorted(events, key=lambda e: e.timestamp, reverse=True)

    # Saved venues

    def save_venue(self, user_id: int, venue_id: int) -> SavedVenue:
        with self._lock:
            saved = self._saved.setdefault(user_id, {})
            if venue_id not in saved:
                saved[venue_id] = SavedVenue(
                    user_id=user_id,
                    venue_id=venue_id,
                    saved_at=datetime.now(timezone.utc),
                )
            return saved[venue_id]

    def unsave_venue(self, user_id: int, venue_id: int) -> None:
        with self._lock:
            self._saved.get(user_id, {}).pop(venue_id, None)

    def get_user_saved_venues(self, user_id: int) -> List[VenueAttributes]:
        with self._lock:
            venue_ids = list(self._saved.get(user_id, {}))
            return [self._venues[vid] for vid in venue_ids if vid in self._venues]


def load_venues_csv(csv_path: str) -> List[VenueCreate]:
    """Load venue records from a CSV file.

    Boolean columns accept true/false, yes/no or 1/0. List columns
    (``photos``, ``cuisine_tags``) are ``|``-separated.

    Args:
        csv_path: Path to the CSV file.

    Returns:
        Venue records in file order.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
        ValueError: If required columns are missing.
    """
    csv_file = Path(csv_path)
    if not csv_file.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    logger.info(f"Loading venues from {csv_path}")
    df = pd.read_csv(csv_file)

    if not REQUIRED_VENUE_COLUMNS.issubset(df.columns):
        missing = REQUIRED_VENUE_COLUMNS - set(df.columns)
        raise ValueError(f"CSV missing required columns: {missing}")

    for col in BOOL_VENUE_COLUMNS:
        if col in df.columns:
            df[col] = df[col].astype(str).str.strip().str.lower().isin(["true", "1", "yes"])

    for col in LIST_VENUE_COLUMNS:
        if col in df.columns:
            df[col] = df[col].fillna("").astype(str).apply(
                lambda s: [part.strip() for part in s.split(LIST_SEPARATOR) if part.strip()]
            )

    # Empty text columns are parsed as float NaN
    text_columns = [
        name for name, info in VenueCreate.model_fields.items()
        if info.annotation is str and name in df.columns
    ]
    for col in text_columns:
        df[col] = df[col].fillna("").astype(str)

    venues = [VenueCreate(**row) for row in df.to_dict(orient="records")]
    logger.info(f"Loaded {len(venues)} venues")
    return venues


def seed_storage(storage: InMemoryStorage, venues: Sequence[VenueCreate]) -> List[VenueAttributes]:
    """Register venue records in storage, assigning ids in order."""
    return [storage.create_venue(v) for v in venues]
