"""TheTVDB v4 API client."""

from __future__ import annotations

import logging
from typing import Any

import requests

from .errors import MetadataError
from .models import EpisodeMetadata, SeriesInfo

LOGGER = logging.getLogger(__name__)

TVDB_BASE_URL = "https://api4.thetvdb.com/v4"
DEFAULT_TIMEOUT = 10.0
MAX_PAGES = 100


class TVDBClient:
    """Fetch series and episode data from TheTVDB.

    The bearer token is requested lazily on the first call and reused for the
    lifetime of the client.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = TVDB_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise MetadataError(
                "TheTVDB API key not found. Set it with "
                "`episort config set metadata.api_key --value <key>` "
                "or the EPISORT__METADATA__API_KEY environment variable."
            )
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self._token: str | None = None

    def get_series_info(self, series_id: str) -> SeriesInfo:
        """Return the series name for ``series_id``."""
        payload = self._get(f"/series/{series_id}")
        data = payload.get("data") or {}
        name = data.get("name")
        if not name:
            raise MetadataError(f"Series {series_id} has no name in the TVDB response.")
        return SeriesInfo(id=str(data.get("id") or series_id), name=str(name))

    def get_episodes(self, series_id: str) -> list[EpisodeMetadata]:
        """Return every episode of ``series_id`` in default (aired) order."""
        episodes: list[EpisodeMetadata] = []
        url: str | None = f"{self.base_url}/series/{series_id}/episodes/default"
        params: dict[str, Any] | None = {"page": 0}
        pages = 0

        while url and pages < MAX_PAGES:
            payload = self._request("GET", url, params=params)
            data = payload.get("data") or {}
            for raw in data.get("episodes") or []:
                episode = self._to_episode(raw)
                if episode is not None:
                    episodes.append(episode)
            url = (payload.get("links") or {}).get("next")
            params = None
            pages += 1

        LOGGER.debug(
            "Fetched %d episodes for series %s in %d page(s).", len(episodes), series_id, pages
        )
        return episodes

    # ------------------------------------------------------------------ #
    # HTTP helpers                                                       #
    # ------------------------------------------------------------------ #

    def _get(self, path: str) -> dict[str, Any]:
        return self._request("GET", f"{self.base_url}{path}")

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self._ensure_token()}", "Accept": "application/json"}
        try:
            response = self.session.request(
                method, url, params=params, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise MetadataError(f"TVDB request failed for {url}: {exc}") from exc
        except ValueError as exc:
            raise MetadataError(f"TVDB returned invalid JSON for {url}: {exc}") from exc

    def _ensure_token(self) -> str:
        if self._token:
            return self._token
        url = f"{self.base_url}/login"
        try:
            response = self.session.post(url, json={"apikey": self.api_key}, timeout=self.timeout)
            response.raise_for_status()
            token = (response.json().get("data") or {}).get("token")
        except requests.RequestException as exc:
            raise MetadataError(f"TVDB login failed: {exc}") from exc
        except ValueError as exc:
            raise MetadataError(f"TVDB login returned invalid JSON: {exc}") from exc
        if not token:
            raise MetadataError("TVDB login response did not include a token.")
        self._token = token
        return token

    @staticmethod
    def _to_episode(raw: dict[str, Any]) -> EpisodeMetadata | None:
        season = raw.get("seasonNumber")
        number = raw.get("number")
        if season is None or number is None:
            return None
        try:
            return EpisodeMetadata(
                season_number=int(season),
                episode_number=int(number),
                title=str(raw.get("name") or ""),
            )
        except (TypeError, ValueError):
            LOGGER.debug("Dropping malformed TVDB episode entry: %r", raw)
            return None


__all__ = ["TVDBClient", "TVDB_BASE_URL"]
