"""Episode lists stored as local YAML or JSON files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .errors import MetadataError
from .models import EpisodeMetadata, SeriesInfo


class LocalEpisodeSource:
    """Serve episode metadata from an exported episode list.

    The file holds a mapping with a ``series`` entry (``id`` and ``name``) and an
    ``episodes`` list whose items carry ``season``, ``episode`` and ``title``.
    JSON files are accepted as well since YAML is a superset of JSON.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._data: dict[str, Any] | None = None

    def get_episodes(self, series_id: str | None = None) -> list[EpisodeMetadata]:
        data = self._load()
        raw_episodes = data.get("episodes") or []
        if not isinstance(raw_episodes, list):
            raise MetadataError(f"{self.path}: 'episodes' must be a list.")

        episodes: list[EpisodeMetadata] = []
        for index, entry in enumerate(raw_episodes):
            if not isinstance(entry, dict):
                raise MetadataError(f"{self.path}: episode #{index} must be a mapping.")
            try:
                episodes.append(
                    EpisodeMetadata(
                        season_number=entry.get("season", entry.get("season_number")),
                        episode_number=entry.get("episode", entry.get("episode_number")),
                        title=str(entry.get("title") or ""),
                    )
                )
            except ValidationError as exc:
                raise MetadataError(f"{self.path}: invalid episode #{index}: {exc}") from exc
        return episodes

    def get_series_info(self, series_id: str | None = None) -> SeriesInfo:
        series = self._load().get("series") or {}
        if not isinstance(series, dict) or not series.get("name"):
            raise MetadataError(f"{self.path}: missing series name.")
        return SeriesInfo(id=str(series.get("id") or series_id or ""), name=str(series["name"]))

    def _load(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data
        try:
            raw = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except OSError as exc:
            raise MetadataError(f"Unable to read episode list {self.path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise MetadataError(f"Failed to parse episode list {self.path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise MetadataError(f"{self.path}: episode list must contain a mapping.")
        self._data = raw
        return raw


__all__ = ["LocalEpisodeSource"]
