"""Filename rule cascade.

Rules are tried in order and the first match wins, so the list encodes
precedence: explicit season/episode tokens first, keyword and bracket forms
last. Every series capture is a lazy ``(.*?)`` anchored at the start of the
stem and never wrapped in another quantifier.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

_SEP = r"[\s._\-]"
_OPEN = r"[\s._\-\[\(]"


@dataclass(frozen=True)
class PatternRule:
    """A single matching rule.

    Attributes:
        id: Stable identifier reported in ``ParseResult.pattern_id``.
        regex: Compiled pattern applied with ``match`` to the filename stem.
        layout: Roles of the positional groups. ``None`` means the roles are
            inferred from the number of groups that participated in the match.
        season: Season assumed when the layout does not capture one.
        default_episode: Episode assumed when the episode group did not participate.
    """

    id: str
    regex: re.Pattern[str]
    layout: Optional[Tuple[str, ...]] = None
    season: int = 1
    default_episode: Optional[int] = None


RULES: tuple[PatternRule, ...] = (
    PatternRule(
        id="season_episode",
        regex=re.compile(
            rf"^(.*?){_OPEN}*(?<![A-Za-z0-9])S(\d{{1,2}})[\s._]?E(\d{{1,4}})(?!\d)",
            re.IGNORECASE,
        ),
        layout=("series", "season", "episode"),
    ),
    PatternRule(
        id="cross",
        regex=re.compile(rf"^(.*?){_OPEN}*(?<!\d)(\d{{1,2}})x(\d{{2,3}})(?!\d)", re.IGNORECASE),
        layout=("series", "season", "episode"),
    ),
    PatternRule(
        id="season_episode_words",
        regex=re.compile(
            rf"^(.*?){_SEP}*Season{_SEP}*(\d{{1,2}})[\s._\-,]*Episode{_SEP}*(\d{{1,4}})(?!\d)",
            re.IGNORECASE,
        ),
        layout=("series", "season", "episode"),
    ),
    PatternRule(
        id="hash_number",
        regex=re.compile(rf"^(.*?){_SEP}*#(\d{{1,4}})(?!\d)(?:{_SEP}+(.+))?"),
    ),
    PatternRule(
        id="dash_number",
        regex=re.compile(
            r"^(?:(.+?)[\s._]+-[\s._]+)?(\d{1,4})(?:v\d{1,2})?"
            r"(?:[\s._]+-[\s._]+(.+?))?(?:[\s._]*\[[^\]]*\])*$",
            re.IGNORECASE,
        ),
    ),
    PatternRule(
        id="leading_number",
        regex=re.compile(rf"^(\d{{1,3}})(?:v\d{{1,2}})?(?![\dA-Za-z])(?:{_SEP}+(.*))?"),
    ),
    PatternRule(
        id="episode_keyword",
        regex=re.compile(
            rf"^(.*?){_SEP}*(?<![A-Za-z])(?:Episode|Ep)\.?{_SEP}*(\d{{1,4}})(?!\d)(?:{_SEP}+(.+))?",
            re.IGNORECASE,
        ),
    ),
    PatternRule(
        id="bracketed_number",
        regex=re.compile(r"^(.*?)[\[\(](\d{1,3})(?:v\d{1,2})?[\]\)]", re.IGNORECASE),
    ),
    PatternRule(
        id="special_keyword",
        regex=re.compile(
            rf"^(.*?){_OPEN}*(?<![A-Za-z])(?:OVA|OAD|Specials?|SP)(?![A-Za-z])"
            rf"(?:{_SEP}*(\d{{1,3}})(?!\d))?",
            re.IGNORECASE,
        ),
        layout=("series", "episode"),
        season=0,
        default_episode=1,
    ),
)


__all__ = ["PatternRule", "RULES"]
