"""Tests for the filename rule cascade."""

import logging

import pytest

from episort.parsing import UNKNOWN_SERIES, PatternParser, clean_series_name, parse_filename


@pytest.mark.parametrize(
    ("file_name", "series", "season", "episode", "pattern_id"),
    [
        ("Show Name S01E02.mkv", "Show Name", 1, 2, "season_episode"),
        ("Show.Name.S01E02.720p.mkv", "Show Name", 1, 2, "season_episode"),
        ("[Group] Show - S02E05 [1080p].mkv", "Show", 2, 5, "season_episode"),
        ("Show S1 E2.mp4", "Show", 1, 2, "season_episode"),
        ("Show 1x02.avi", "Show", 1, 2, "cross"),
        ("Show Season 2 Episode 3.mkv", "Show", 2, 3, "season_episode_words"),
        ("Show #5.mkv", "Show", 1, 5, "hash_number"),
        ("Show - 02 - The Title.mkv", "Show", 1, 2, "dash_number"),
        ("Show - 12.mkv", "Show", 1, 12, "dash_number"),
        ("05 Some Title.mkv", UNKNOWN_SERIES, 1, 5, "leading_number"),
        ("Show Episode 5.mkv", "Show", 1, 5, "episode_keyword"),
        ("Show Ep.07.mkv", "Show", 1, 7, "episode_keyword"),
        ("[Group] Show [05].mkv", "Show", 1, 5, "bracketed_number"),
        ("Show (11).mkv", "Show", 1, 11, "bracketed_number"),
        ("Show OVA 02.mkv", "Show", 0, 2, "special_keyword"),
        ("Show Special 3.mkv", "Show", 0, 3, "special_keyword"),
        ("Show SP1.mkv", "Show", 0, 1, "special_keyword"),
        ("Show OVA.mkv", "Show", 0, 1, "special_keyword"),
    ],
)
def test_rule_cascade_extracts_identity(
    file_name: str, series: str, season: int, episode: int, pattern_id: str
) -> None:
    result = PatternParser().parse(file_name)

    assert result is not None
    assert result.series_name == series
    assert result.season_number == season
    assert result.episode_number == episode
    assert result.pattern_id == pattern_id


def test_earlier_rules_take_precedence() -> None:
    # Both the season/episode token and the bracketed number are present.
    result = parse_filename("Show S02E03 [04].mkv")

    assert result is not None
    assert result.pattern_id == "season_episode"
    assert (result.season_number, result.episode_number) == (2, 3)


def test_numeric_first_pair_is_episode_and_title() -> None:
    result = parse_filename("02 - Pilot.mkv")

    assert result is not None
    assert result.episode_number == 2
    assert result.title == "Pilot"
    assert result.series_name == UNKNOWN_SERIES


def test_three_groups_are_series_episode_title() -> None:
    result = parse_filename("Show #05 The Return.mkv")

    assert result is not None
    assert result.series_name == "Show"
    assert result.episode_number == 5
    assert result.title == "The Return"


@pytest.mark.parametrize("file_name", ["", "   ", "random_file.mkv", "notes.txt"])
def test_unrecognized_names_return_none(file_name: str) -> None:
    assert PatternParser().parse(file_name) is None


def test_episode_zero_is_never_produced() -> None:
    assert parse_filename("Show S01E00.mkv") is None


def test_overlong_names_are_truncated() -> None:
    parser = PatternParser(max_length=32)

    assert parser.parse("A" * 300 + " S01E02.mkv") is None
    assert parser.parse("Show S01E02.mkv") is not None


def test_parser_is_reentrant() -> None:
    parser = PatternParser()

    first = parser.parse("Alpha S01E01.mkv")
    second = parser.parse("Beta 2x07.mkv")
    again = parser.parse("Alpha S01E01.mkv")

    assert first == again
    assert second is not None
    assert (second.series_name, second.season_number, second.episode_number) == ("Beta", 2, 7)


def test_parse_many_keys_results_by_name() -> None:
    results = PatternParser().parse_many(["Show S01E01.mkv", "nothing here.mkv"])

    assert results["Show S01E01.mkv"] is not None
    assert results["nothing here.mkv"] is None


def test_debug_flag_logs_rule_attempts(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="episort.parsing.parser")

    PatternParser(debug=True).parse("Show 1x02.mkv")

    messages = [record.getMessage() for record in caplog.records]
    assert any("rule season_episode did not match" in message for message in messages)
    assert any("rule cross matched" in message for message in messages)


def test_parser_without_debug_skips_rule_logging(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="episort.parsing.parser")

    PatternParser().parse("Show 1x02.mkv")

    assert not any("rule" in record.getMessage() for record in caplog.records)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("[Group] My.Show_Name", "My Show Name"),
        ("【字幕组】Show (2019)", "Show"),
        ("Show -", "Show"),
        ("", UNKNOWN_SERIES),
        ("[Group]", UNKNOWN_SERIES),
    ],
)
def test_clean_series_name(raw: str, expected: str) -> None:
    assert clean_series_name(raw) == expected
