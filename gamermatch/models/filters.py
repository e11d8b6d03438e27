"""Discovery filters for GamerMatch."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from gamermatch.models.profile import Genre, Platform, Playstyle, Profile, Region
from gamermatch.utils.errors import InvalidFilterError


class DiscoveryFilters(BaseModel):
    """
    Caller-supplied narrowing of the discovery pool.

    Every field is optional and the set fields are AND-combined. An empty list
    means "no filter" rather than "match nothing".
    """

    platforms: Optional[List[Platform]] = None
    genres: Optional[List[Genre]] = None
    playstyle: Optional[Playstyle] = None
    voice_chat: Optional[bool] = Field(default=None, alias="voiceChat")
    regions: Optional[List[Region]] = None

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    @field_validator("platforms", "genres", "regions")
    @classmethod
    def empty_means_unset(cls, v: Optional[list]) -> Optional[list]:
        if not v:
            return None
        return v

    @classmethod
    def parse(cls, raw: Optional[Dict[str, Any]]) -> Optional["DiscoveryFilters"]:
        """
        Validate raw filter input.

        Args:
            raw (Optional[Dict[str, Any]]): Filter values as received from the caller.

        Returns:
            Optional[DiscoveryFilters]: Parsed filters, or None when nothing was given.

        Raises:
            InvalidFilterError: If any value is not one of the allowed options.
        """
        if raw is None:
            return None
        try:
            return cls.model_validate(raw)
        except PydanticValidationError as e:
            raise InvalidFilterError(
                "Invalid discovery filters",
                details={"errors": [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]},
            ) from e

    def is_empty(self) -> bool:
        return all(
            value is None for value in (self.platforms, self.genres, self.playstyle, self.voice_chat, self.regions)
        )

    def matches(self, candidate: Profile) -> bool:
        """Return True if the candidate passes every set filter."""
        if self.platforms is not None and not set(self.platforms) & set(candidate.platforms):
            return False
        if self.genres is not None and not set(self.genres) & set(candidate.favorite_genres):
            return False
        if self.playstyle is not None and candidate.playstyle != self.playstyle:
            return False
        if self.voice_chat is not None and candidate.voice_chat != self.voice_chat:
            return False
        if self.regions is not None and candidate.region not in self.regions:
            return False
        return True
