"""Parser result models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_SERIES = "Unknown Series"


class ParseResult(BaseModel):
    """Season/episode identity extracted from a single filename.

    Attributes:
        series_name: Sanitized series name, or ``UNKNOWN_SERIES`` when the name
            should come from the series metadata instead.
        season_number: Parsed season; 0 marks special content.
        episode_number: Parsed episode number, never 0.
        pattern_id: Identifier of the rule that matched.
        title: Trailing episode title text, when the rule captured one.
    """

    model_config = ConfigDict(frozen=True)

    series_name: str = UNKNOWN_SERIES
    season_number: int = Field(ge=0)
    episode_number: int = Field(ge=1)
    pattern_id: str
    title: Optional[str] = None

    @property
    def is_special(self) -> bool:
        return self.season_number == 0


__all__ = ["ParseResult", "UNKNOWN_SERIES"]
