"""Filename parsing for episort."""

from .models import UNKNOWN_SERIES, ParseResult
from .parser import PatternParser, clean_series_name, parse_filename
from .patterns import RULES, PatternRule

__all__ = [
    "PatternParser",
    "PatternRule",
    "ParseResult",
    "RULES",
    "UNKNOWN_SERIES",
    "clean_series_name",
    "parse_filename",
]
