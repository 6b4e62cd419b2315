"""Episode reference data models."""

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

EpisodeKey = Tuple[int, int]


class EpisodeMetadata(BaseModel):
    """A single episode from the remote episode database.

    Attributes:
        season_number: Season the episode belongs to; 0 marks specials.
        episode_number: Episode number within the season.
        title: Episode title as provided by the database.
    """

    model_config = ConfigDict(frozen=True)

    season_number: int = Field(ge=0)
    episode_number: int = Field(ge=0)
    title: str = ""

    @property
    def key(self) -> EpisodeKey:
        """Return the `(season, episode)` lookup key."""
        return (self.season_number, self.episode_number)


class SeriesInfo(BaseModel):
    """Basic series information."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


__all__ = ["EpisodeKey", "EpisodeMetadata", "SeriesInfo"]
