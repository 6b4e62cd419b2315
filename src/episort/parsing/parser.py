"""Season/episode extraction from arbitrary video filenames."""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional, Sequence

from .models import UNKNOWN_SERIES, ParseResult
from .patterns import RULES, PatternRule

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 255

_EXTENSION = re.compile(r"\.[A-Za-z0-9]{2,4}$")
_ANNOTATIONS = re.compile(
    r"\[[^\]]*\]|\([^)]*\)|\{[^}]*\}|"
    r"【[^】]*】|「[^」]*」|『[^』]*』|〔[^〕]*〕|（[^）]*）"
)
_SEPARATORS = re.compile(r"[._]+")
_WHITESPACE = re.compile(r"\s+")


def clean_series_name(raw: Optional[str]) -> str:
    """Strip annotation groups and separators from a captured series name."""
    if not raw:
        return UNKNOWN_SERIES
    name = _ANNOTATIONS.sub(" ", raw)
    name = _SEPARATORS.sub(" ", name)
    name = _WHITESPACE.sub(" ", name).strip(" -–~")
    return name or UNKNOWN_SERIES


def strip_extension(file_name: str) -> str:
    return _EXTENSION.sub("", file_name)


class PatternParser:
    """Apply the ordered rule cascade to filenames.

    The parser holds no per-call state, so one instance can be shared freely.

    Args:
        rules: Rules to try, in priority order.
        max_length: Number of stem characters considered; longer input is truncated.
        debug: Log every rule attempt at DEBUG level.
    """

    def __init__(
        self,
        rules: Sequence[PatternRule] = RULES,
        *,
        max_length: int = DEFAULT_MAX_LENGTH,
        debug: bool = False,
    ) -> None:
        self.rules = tuple(rules)
        self.max_length = max_length
        self.debug = debug

    def parse(self, file_name: str) -> Optional[ParseResult]:
        """Return the identity encoded in ``file_name`` or None when no rule applies."""
        if not file_name or not file_name.strip():
            return None

        stem = strip_extension(file_name.strip())[: self.max_length]
        for rule in self.rules:
            match = rule.regex.match(stem)
            if match is None:
                if self.debug:
                    LOGGER.debug("%s: rule %s did not match", file_name, rule.id)
                continue
            result = self._interpret(rule, match)
            if self.debug:
                LOGGER.debug(
                    "%s: rule %s matched groups %r -> %r",
                    file_name,
                    rule.id,
                    match.groups(),
                    result,
                )
            if result is not None:
                return result

        LOGGER.debug("No pattern matched %r", file_name)
        return None

    def parse_many(self, file_names: Iterable[str]) -> dict[str, Optional[ParseResult]]:
        return {name: self.parse(name) for name in file_names}

    def _interpret(self, rule: PatternRule, match: re.Match[str]) -> Optional[ParseResult]:
        if rule.layout is not None:
            roles = dict(zip(rule.layout, match.groups()))
        else:
            roles = _roles_by_count([group for group in match.groups() if group is not None])

        episode_text = roles.get("episode")
        if episode_text:
            episode = int(episode_text)
        elif rule.default_episode is not None:
            episode = rule.default_episode
        else:
            return None
        if episode < 1:
            return None

        season_text = roles.get("season")
        season = int(season_text) if season_text else rule.season
        title = (roles.get("title") or "").strip(" -._") or None

        return ParseResult(
            series_name=clean_series_name(roles.get("series")),
            season_number=season,
            episode_number=episode,
            pattern_id=rule.id,
            title=title,
        )


def _roles_by_count(groups: list[str]) -> dict[str, str]:
    if len(groups) == 1:
        return {"episode": groups[0]}
    if len(groups) == 2:
        first, second = groups
        if first.strip().isdigit():
            return {"episode": first, "title": second}
        return {"series": first, "episode": second}
    if len(groups) >= 3:
        return {"series": groups[0], "episode": groups[1], "title": groups[2]}
    return {}


_DEFAULT_PARSER = PatternParser()


def parse_filename(file_name: str) -> Optional[ParseResult]:
    """Parse ``file_name`` with the default rule cascade."""
    return _DEFAULT_PARSER.parse(file_name)


__all__ = ["PatternParser", "clean_series_name", "parse_filename", "strip_extension"]
