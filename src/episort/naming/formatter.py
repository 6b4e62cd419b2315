"""Canonical episode filename rendering."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Optional

from episort.config.models import NamingOptions
from episort.metadata.models import EpisodeMetadata

from .errors import NamingError

_INVALID_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_WHITESPACE = re.compile(r"\s+")
_TITLE_SEGMENT = re.compile(r"\s*[-–]\s*\{title\}|\{title\}\s*[-–]\s*|\{title\}")
_VERSION_FIELD = re.compile(r"\{version(?:![rsa])?(?::[^{}]*)?\}")


def sanitize_filename(name: str) -> str:
    """Remove characters that are invalid in file names on common filesystems."""
    sanitized = _INVALID_CHARS.sub("", name)
    sanitized = _WHITESPACE.sub(" ", sanitized)
    return sanitized.strip(". ")


@lru_cache(maxsize=None)
def version_suffix_pattern(template: str) -> re.Pattern[str]:
    """Compile ``template`` into a pattern matching its suffix at the end of a stem.

    Group 1 holds the version number.

    Raises:
        NamingError: If ``template`` does not contain exactly one ``{version}`` field.
    """
    pieces = _VERSION_FIELD.split(template)
    if len(pieces) != 2:
        raise NamingError(
            f"Version template {template!r} must contain '{{version}}' exactly once."
        )
    prefix, suffix = (piece.replace("{{", "{").replace("}}", "}") for piece in pieces)
    return re.compile(rf"{re.escape(prefix)}(\d{{1,3}}){re.escape(suffix)}$")


class NameFormatter:
    """Render target filenames from episode metadata and a naming convention.

    Rendering is deterministic: identical inputs always produce byte-identical
    names, which is what lets callers decide whether a file is already correct
    with a plain string comparison.
    """

    def __init__(self, convention: NamingOptions | None = None) -> None:
        self.convention = convention or NamingOptions()
        version_suffix_pattern(self.convention.version_template)

    def render(
        self,
        episode: EpisodeMetadata,
        series_name: str,
        extension: str,
        version: Optional[int] = None,
    ) -> str:
        """Render the filename for ``episode``, dispatching season 0 to the special template."""
        suffix = self.version_suffix(version)
        if episode.season_number == 0:
            return self.render_special_name(
                series_name, episode.episode_number, episode.title, extension, suffix
            )
        return self.render_episode_name(
            series_name,
            episode.season_number,
            episode.episode_number,
            episode.title,
            extension,
            suffix,
        )

    def render_episode_name(
        self,
        series_name: str,
        season: int,
        episode: int,
        title: str,
        extension: str,
        version_suffix: Optional[str] = None,
    ) -> str:
        return self._render(
            self.convention.episode_template,
            series_name,
            season,
            episode,
            title,
            extension,
            version_suffix,
        )

    def render_special_name(
        self,
        series_name: str,
        episode: int,
        title: str,
        extension: str,
        version_suffix: Optional[str] = None,
    ) -> str:
        return self._render(
            self.convention.special_template,
            series_name,
            0,
            episode,
            title,
            extension,
            version_suffix,
        )

    def version_suffix(self, version: Optional[int]) -> Optional[str]:
        """Return the suffix for ``version``; version 1 is implicit and unsuffixed."""
        if version is None or version <= 1:
            return None
        try:
            return self.convention.version_template.format(version=version)
        except (KeyError, IndexError, ValueError) as exc:
            raise NamingError(
                f"Invalid version template {self.convention.version_template!r}: {exc}"
            ) from exc

    def apply_version(self, file_name: str, extension: str, version: Optional[int]) -> str:
        """Insert the suffix for ``version`` into an already rendered ``file_name``."""
        suffix = self.version_suffix(version)
        if not suffix:
            return file_name
        base = file_name
        if extension and file_name.endswith(extension):
            base = file_name[: -len(extension)]
        return f"{base}{suffix}{extension}"

    def read_version_suffix(self, stem: str) -> Optional[int]:
        """Return the version written by ``version_template`` at the end of ``stem``."""
        match = version_suffix_pattern(self.convention.version_template).search(stem)
        return int(match.group(1)) if match else None

    def held_version(self, file_name: str, target_name: str, extension: str) -> Optional[int]:
        """Return the version whose rendered name ``file_name`` already is, if any.

        ``target_name`` itself is version 1; a name carrying the configured
        suffix counts only when re-rendering that version reproduces it exactly.
        """
        if file_name == target_name:
            return 1
        stem = file_name
        if extension and file_name.endswith(extension):
            stem = file_name[: -len(extension)]
        version = self.read_version_suffix(stem)
        if version is None or version < 2:
            return None
        if self.apply_version(target_name, extension, version) != file_name:
            return None
        return version

    def target_folder(self, root: Path, episode: EpisodeMetadata) -> Optional[Path]:
        """Return the season folder for ``episode`` or None when files stay in place."""
        template = self.convention.season_folder
        if not template:
            return None
        if episode.season_number == 0 and self.convention.specials_folder:
            return root / sanitize_filename(self.convention.specials_folder)
        try:
            folder = template.format(season=episode.season_number)
        except (KeyError, IndexError, ValueError) as exc:
            raise NamingError(f"Invalid season folder template {template!r}: {exc}") from exc
        return root / sanitize_filename(folder)

    def _render(
        self,
        template: str,
        series_name: str,
        season: int,
        episode: int,
        title: str,
        extension: str,
        version_suffix: Optional[str],
    ) -> str:
        title = sanitize_filename(title or "")
        if not title:
            template = _TITLE_SEGMENT.sub("", template)
        try:
            base = template.format(
                series=sanitize_filename(series_name),
                season=season,
                episode=episode,
                title=title,
            )
        except (KeyError, IndexError, ValueError) as exc:
            raise NamingError(f"Invalid naming template {template!r}: {exc}") from exc

        base = sanitize_filename(base)
        if not base:
            raise NamingError(f"Template {template!r} rendered an empty filename.")
        return f"{base}{version_suffix or ''}{extension}"


__all__ = ["NameFormatter", "sanitize_filename", "version_suffix_pattern"]
