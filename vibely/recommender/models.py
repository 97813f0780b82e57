"""Data models for the recommendation core.

Venue records, quiz-derived preference profiles, and interaction events are
immutable pydantic models. Categorical venue tags are plain strings; the enums
below name the values the scorer looks for and compare equal to those strings.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Mood(str, Enum):
    """Moods a user can declare in the quiz."""

    STUDY = "study"
    WORK = "work"
    DATE = "date"
    HANGOUT = "hangout"


class Ambience(str, Enum):
    COZY = "Cozy"
    AESTHETIC = "Aesthetic"


class NoiseLevel(str, Enum):
    QUIET = "Quiet"
    SOCIAL = "Social"


class Lighting(str, Enum):
    MOODY = "Moody"


class SeatingStyle(str, Enum):
    BOOTHS = "Booths"


class WifiQuality(str, Enum):
    EXCELLENT = "Excellent"


class InstaWorthiness(str, Enum):
    HIGH = "High"


class VenueCreate(BaseModel):
    """Venue fields supplied on registration, before an id is assigned."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Display name")
    address: str = Field(default="", description="Street address")
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    budget_tier: str = Field(..., description='Budget tier, e.g. "₹₹"')
    ambience: str = Field(..., description='Ambience category, e.g. "Cozy"')
    noise_level: str = Field(..., description='"Quiet", "Moderate" or "Social"')
    lighting: str = Field(default="", description='e.g. "Bright" or "Moody"')
    seating_style: str = Field(default="", description='e.g. "Booths"')
    work_friendly: bool = False
    wifi_quality: str = Field(default="", description='e.g. "Excellent"')
    pet_friendly: bool = False
    insta_worthiness: str = Field(default="", description='"Low", "Medium" or "High"')
    plug_available: bool = False
    photos: List[str] = Field(default_factory=list)
    cuisine_tags: List[str] = Field(default_factory=list)
    music_style: str = ""
    busy_level: str = ""


class VenueAttributes(VenueCreate):
    """A registered venue with its identifier."""

    id: int = Field(..., description="Venue identifier")


class PreferenceProfile(BaseModel):
    """A user's quiz response.

    Re-submitting the quiz replaces the whole profile. ``mood`` is kept as a
    plain string: values outside :class:`Mood` are accepted and simply match
    no mood rules.
    """

    model_config = ConfigDict(frozen=True)

    budget: str = Field(..., description="Declared budget tier")
    desired_ambiences: FrozenSet[str] = Field(
        default_factory=frozenset, description="Ambience categories the user likes"
    )
    mood: str = Field(..., description="study, work, date or hangout")
    wants_pet_friendly: bool = False


class InteractionEvent(BaseModel):
    """A single user/venue interaction, e.g. a view or a save."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    venue_id: int
    interaction_type: str = Field(..., min_length=1, description='e.g. "view", "save"')
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ScoredCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    venue_id: int
    score: int


class UserCreate(BaseModel):
    email: str = Field(..., min_length=3)
    name: str = ""


class User(BaseModel):
    """A registered user. ``profile`` is None until the quiz is submitted."""

    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    name: str = ""
    profile: Optional[PreferenceProfile] = None


class SavedVenue(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: int
    venue_id: int
    saved_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
