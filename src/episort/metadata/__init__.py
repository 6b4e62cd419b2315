"""Episode metadata sources."""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

from .errors import MetadataError
from .local import LocalEpisodeSource
from .models import EpisodeKey, EpisodeMetadata, SeriesInfo
from .tvdb import TVDBClient

LOGGER = logging.getLogger(__name__)


class MetadataSource(Protocol):
    """Interface the engine expects from an episode database."""

    def get_episodes(self, series_id: str) -> list[EpisodeMetadata]: ...

    def get_series_info(self, series_id: str) -> SeriesInfo: ...


def index_episodes(episodes: Iterable[EpisodeMetadata]) -> dict[EpisodeKey, EpisodeMetadata]:
    """Key episodes by ``(season, episode)``; the first occurrence of a key wins."""
    index: dict[EpisodeKey, EpisodeMetadata] = {}
    for episode in episodes:
        if episode.key in index:
            LOGGER.debug("Ignoring duplicate metadata entry for S%02dE%02d.", *episode.key)
            continue
        index[episode.key] = episode
    return index


__all__ = [
    "EpisodeKey",
    "EpisodeMetadata",
    "LocalEpisodeSource",
    "MetadataError",
    "MetadataSource",
    "SeriesInfo",
    "TVDBClient",
    "index_episodes",
]
