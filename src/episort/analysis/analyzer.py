"""Classify discovered files against episode metadata."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Mapping, Optional

from episort.config.models import DEFAULT_SPECIAL_FOLDERS
from episort.ingestion.models import FileRecord
from episort.metadata import index_episodes
from episort.metadata.models import EpisodeKey, EpisodeMetadata
from episort.naming.errors import NamingError
from episort.naming.formatter import NameFormatter
from episort.parsing.parser import PatternParser

from .models import AnalysisResult, ClassifiedFile

LOGGER = logging.getLogger(__name__)


class SpecialFolderMatcher:
    """Recognize folders that hold special content (OVA, specials, movies, extras).

    A folder name matches when it equals one of the configured names, optionally
    prefixed by a season marker such as ``S01`` or ``Season 2``.
    """

    def __init__(self, names: Iterable[str] = DEFAULT_SPECIAL_FOLDERS) -> None:
        ordered = sorted({name.strip() for name in names if name.strip()}, key=len, reverse=True)
        alternation = "|".join(re.escape(name) for name in ordered) or r"(?!)"
        self._pattern = re.compile(
            rf"^(?:(?:S|Season)[\s._\-]*\d{{1,2}}[\s._\-]*)?(?:{alternation})$",
            re.IGNORECASE,
        )

    def matches(self, folder_name: str) -> bool:
        return bool(self._pattern.match(folder_name.strip()))

    def is_special(self, path: Path, root: Optional[Path] = None) -> bool:
        """Return True when a folder between ``root`` and ``path`` is a special folder.

        Without a root, or for a path outside it, only the file's own folder is
        checked; ancestors such as ``/media/Movies`` belong to the library's
        location, not its layout.
        """
        parent = path.parent
        if root is not None:
            try:
                return any(self.matches(part) for part in parent.relative_to(root).parts)
            except ValueError:
                pass
        return self.matches(parent.name)


class StateAnalyzer:
    """Partition files into skip, rename, duplicate and special buckets.

    Args:
        parser: Pattern parser used to read each filename.
        formatter: Formatter rendering the canonical name for matched episodes.
        root: Library root; required for season folders and special-folder matching
            relative to the library.
    """

    def __init__(
        self,
        parser: PatternParser,
        formatter: NameFormatter,
        *,
        root: Optional[Path] = None,
    ) -> None:
        self.parser = parser
        self.formatter = formatter
        self.root = root

    def analyze(
        self,
        files: Iterable[FileRecord],
        episodes: Iterable[EpisodeMetadata] | Mapping[EpisodeKey, EpisodeMetadata],
        series_name: str = "",
        special_matcher: Optional[SpecialFolderMatcher] = None,
    ) -> AnalysisResult:
        """Classify ``files`` against ``episodes``.

        Special-folder files are set aside first. Every other file is parsed and
        looked up by its exact ``(season, episode)``; files without an exact
        match are reported and left out. Matched files are grouped by episode:
        single files land in ``skip`` or ``rename``, larger groups are returned
        untouched in ``duplicates``.
        """
        index = dict(episodes) if isinstance(episodes, Mapping) else index_episodes(episodes)
        result = AnalysisResult()

        regular: list[FileRecord] = []
        for record in files:
            if special_matcher is not None and special_matcher.is_special(
                record.original_path, self.root
            ):
                LOGGER.debug("Routing %s to specials.", record.original_path)
                result.specials.append(record)
            else:
                regular.append(record)

        groups: dict[EpisodeKey, list[ClassifiedFile]] = {}
        for record in regular:
            try:
                classified = self._classify(record, index, series_name, result)
            except (NamingError, ValueError) as exc:
                self._warn(result, f"{record.original_path}: could not be classified: {exc}")
                result.unparseable.append(record)
                continue
            if classified is not None and classified.episode_key is not None:
                groups.setdefault(classified.episode_key, []).append(classified)

        for key in sorted(groups):
            members = groups[key]
            if len(members) >= 2:
                result.duplicates[key] = members
                LOGGER.info(
                    "%d files claim S%02dE%02d; deferring to version resolution.",
                    len(members),
                    *key,
                )
            elif members[0].is_already_correct:
                result.skip.append(members[0])
            else:
                result.rename.append(members[0])

        return result

    def _classify(
        self,
        record: FileRecord,
        index: Mapping[EpisodeKey, EpisodeMetadata],
        series_name: str,
        result: AnalysisResult,
    ) -> Optional[ClassifiedFile]:
        name = record.original_name
        if not name or not name.strip():
            self._warn(result, f"{record.original_path}: file has no name; skipped.")
            result.unparseable.append(record)
            return None

        parsed = self.parser.parse(name)
        if parsed is None:
            self._warn(result, f"{name}: no season/episode pattern recognized; skipped.")
            result.unparseable.append(record)
            return None

        key = (parsed.season_number, parsed.episode_number)
        episode = index.get(key)
        if episode is None:
            self._warn(
                result, f"{name}: no episode metadata for S{key[0]:02d}E{key[1]:02d}; skipped."
            )
            result.unmatched.append(ClassifiedFile(file_record=record, parse_result=parsed))
            return None

        resolved_series = series_name or parsed.series_name
        target_name = self.formatter.render(episode, resolved_series, record.extension)
        current_folder = record.original_path.parent
        target_folder = current_folder
        if self.root is not None:
            target_folder = self.formatter.target_folder(self.root, episode) or current_folder

        return ClassifiedFile(
            file_record=record,
            parse_result=parsed,
            matched_episode=episode,
            target_name=target_name,
            target_folder=target_folder,
            is_already_correct=name == target_name and current_folder == target_folder,
        )

    @staticmethod
    def _warn(result: AnalysisResult, message: str) -> None:
        LOGGER.warning(message)
        result.warnings.append(message)


__all__ = ["SpecialFolderMatcher", "StateAnalyzer"]
