"""Profile model for GamerMatch."""

import re
from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator, model_validator

MIN_AGE = 18
MAX_PHOTOS = 6
MAX_TOP_GAMES = 3
MAX_GAME_NAME_LENGTH = 50
MAX_GENRES = 5
MAX_BIO_LENGTH = 500
MIN_DISPLAY_NAME_LENGTH = 2
MAX_DISPLAY_NAME_LENGTH = 30

DISPLAY_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")


class Platform(str, Enum):
    """Gaming platforms a profile plays on."""

    PC = "PC"
    PLAYSTATION = "PlayStation"
    XBOX = "Xbox"
    NINTENDO_SWITCH = "Nintendo Switch"
    MOBILE = "Mobile"


class Genre(str, Enum):
    """Favourite game genres."""

    FPS = "FPS"
    RPG = "RPG"
    MMORPG = "MMORPG"
    MOBA = "MOBA"
    BATTLE_ROYALE = "Battle Royale"
    STRATEGY = "Strategy"
    SPORTS = "Sports"
    RACING = "Racing"
    PUZZLE = "Puzzle"
    HORROR = "Horror"
    SIMULATION = "Simulation"
    FIGHTING = "Fighting"
    ADVENTURE = "Adventure"
    INDIE = "Indie"
    OTHER = "Other"


class Playstyle(str, Enum):
    CASUAL = "casual"
    COMPETITIVE = "competitive"
    BOTH = "both"


class PlayTime(str, Enum):
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"
    NIGHT = "Night"
    WEEKENDS = "Weekends"


class Pronoun(str, Enum):
    HE_HIM = "he/him"
    SHE_HER = "she/her"
    THEY_THEM = "they/them"
    OTHER = "other"
    PREFER_NOT_TO_SAY = "prefer not to say"


class Region(str, Enum):
    """Coarse geography. Exact locations are never stored."""

    US_NORTHEAST = "US - Northeast"
    US_SOUTHEAST = "US - Southeast"
    US_MIDWEST = "US - Midwest"
    US_SOUTHWEST = "US - Southwest"
    US_WEST = "US - West"
    CANADA_EAST = "Canada - East"
    CANADA_WEST = "Canada - West"
    UK = "UK"
    EU_WEST = "EU - West"
    EU_CENTRAL = "EU - Central"
    EU_EAST = "EU - East"
    EU_NORTH = "EU - North"
    EU_SOUTH = "EU - South"
    ASIA_EAST = "Asia - East"
    ASIA_SOUTHEAST = "Asia - Southeast"
    ASIA_SOUTH = "Asia - South"
    OCEANIA = "Oceania"
    LATIN_AMERICA = "Latin America"
    MIDDLE_EAST = "Middle East"
    AFRICA = "Africa"
    OTHER = "Other"


def calculate_age(date_of_birth: date, today: Optional[date] = None) -> int:
    """Return the age in whole years on `today` (defaults to the current date)."""
    today = today or date.today()
    had_birthday = (today.month, today.day) >= (date_of_birth.month, date_of_birth.day)
    return today.year - date_of_birth.year - (0 if had_birthday else 1)


def _unique(values: list) -> list:
    # Remove duplicates while preserving order
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def _check_display_name(v: str) -> str:
    v = v.strip()
    if not MIN_DISPLAY_NAME_LENGTH <= len(v) <= MAX_DISPLAY_NAME_LENGTH:
        raise ValueError(
            f"Display name must be between {MIN_DISPLAY_NAME_LENGTH} and {MAX_DISPLAY_NAME_LENGTH} characters"
        )
    if not DISPLAY_NAME_PATTERN.match(v):
        raise ValueError("Display name can only contain letters, numbers, and underscores")
    return v


def _check_date_of_birth(v: date) -> date:
    if calculate_age(v) < MIN_AGE:
        raise ValueError(f"You must be at least {MIN_AGE} years old")
    return v


def _check_bio(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if len(v) > MAX_BIO_LENGTH:
        raise ValueError(f"Bio must be less than {MAX_BIO_LENGTH} characters")
    return v or None


def _check_genres(v: List["Genre"]) -> List["Genre"]:
    v = _unique(v)
    if len(v) > MAX_GENRES:
        raise ValueError(f"Please select up to {MAX_GENRES} genres")
    return v


def _check_top_games(v: List[str]) -> List[str]:
    games = [game.strip() for game in v]
    if any(not game for game in games):
        raise ValueError("Game name cannot be empty")
    if any(len(game) > MAX_GAME_NAME_LENGTH for game in games):
        raise ValueError(f"Game name must be less than {MAX_GAME_NAME_LENGTH} characters")
    if len(games) > MAX_TOP_GAMES:
        raise ValueError(f"Please add up to {MAX_TOP_GAMES} games")
    return games


def _check_photo_urls(v: List[str]) -> List[str]:
    if len(v) > MAX_PHOTOS:
        raise ValueError(f"You can upload up to {MAX_PHOTOS} photos")
    for url in v:
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid photo URL: {url}")
    return v


class Profile(BaseModel):
    """
    A user's gaming dating identity.

    Profiles created at signup may be partial; the gaming fields become
    mandatory once `onboarding_completed` is set. Only discoverable profiles
    (active, not banned, onboarded) take part in discovery and matching.
    """

    id: str = Field(..., min_length=1, description="Unique profile ID (auth user ID)")
    display_name: str
    date_of_birth: date
    pronouns: Optional[Pronoun] = None
    region: Optional[Region] = None
    bio: Optional[str] = None
    platforms: List[Platform] = Field(default_factory=list)
    favorite_genres: List[Genre] = Field(default_factory=list)
    top_games: List[str] = Field(default_factory=list)
    playstyle: Optional[Playstyle] = None
    voice_chat: bool = False
    typical_play_times: List[PlayTime] = Field(default_factory=list)
    photo_urls: List[str] = Field(default_factory=list)
    is_active: bool = True
    is_banned: bool = False
    onboarding_completed: bool = False
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, v: str) -> str:
        return _check_display_name(v)

    @field_validator("date_of_birth")
    @classmethod
    def validate_date_of_birth(cls, v: date) -> date:
        return _check_date_of_birth(v)

    @field_validator("bio")
    @classmethod
    def validate_bio(cls, v: Optional[str]) -> Optional[str]:
        return _check_bio(v)

    @field_validator("favorite_genres")
    @classmethod
    def validate_genres(cls, v: List[Genre]) -> List[Genre]:
        return _check_genres(v)

    @field_validator("top_games")
    @classmethod
    def validate_top_games(cls, v: List[str]) -> List[str]:
        return _check_top_games(v)

    @field_validator("photo_urls")
    @classmethod
    def validate_photo_urls(cls, v: List[str]) -> List[str]:
        return _check_photo_urls(v)

    @field_validator("platforms", "typical_play_times")
    @classmethod
    def deduplicate(cls, v: list) -> list:
        return _unique(v)

    @model_validator(mode="after")
    def check_onboarding_fields(self) -> "Profile":
        """Require the gaming fields once onboarding is complete."""
        if not self.onboarding_completed:
            return self
        if self.region is None:
            raise ValueError("Please select a region")
        if not self.platforms:
            raise ValueError("Please select at least one platform")
        if not self.favorite_genres:
            raise ValueError("Please select at least one genre")
        if not self.top_games:
            raise ValueError("Please add at least one favorite game")
        if self.playstyle is None:
            raise ValueError("Please select a playstyle")
        return self

    @property
    def age(self) -> int:
        return calculate_age(self.date_of_birth)

    def is_discoverable(self) -> bool:
        """
        Check if the profile can be shown in discovery and take part in matches.

        Returns:
            bool: True if active, not banned and onboarding is complete.
        """
        return self.is_active and not self.is_banned and self.onboarding_completed


class ProfileUpdate(BaseModel):
    """Partial profile edit. Only the fields that are set are applied."""

    display_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    pronouns: Optional[Pronoun] = None
    region: Optional[Region] = None
    bio: Optional[str] = None
    platforms: Optional[List[Platform]] = None
    favorite_genres: Optional[List[Genre]] = None
    top_games: Optional[List[str]] = None
    playstyle: Optional[Playstyle] = None
    voice_chat: Optional[bool] = None
    typical_play_times: Optional[List[PlayTime]] = None
    photo_urls: Optional[List[str]] = None
    onboarding_completed: Optional[bool] = None
