"""Tests for the state analyzer and special-folder routing."""

from pathlib import Path

import pytest

from episort.analysis import SpecialFolderMatcher, StateAnalyzer
from episort.config.models import NamingOptions
from episort.ingestion import FileRecord
from episort.metadata import EpisodeMetadata
from episort.naming import NameFormatter, NamingError
from episort.parsing import PatternParser

SHORT_TEMPLATE = "{series} S{season:02d}E{episode:02d}"


def _episodes() -> list[EpisodeMetadata]:
    return [
        EpisodeMetadata(season_number=1, episode_number=number, title=f"Episode {number}")
        for number in range(1, 5)
    ] + [EpisodeMetadata(season_number=0, episode_number=1, title="Special")]


def _analyzer(root: Path, **naming: str) -> StateAnalyzer:
    options = NamingOptions(episode_template=SHORT_TEMPLATE, **naming)
    return StateAnalyzer(PatternParser(), NameFormatter(options), root=root)


def _record(root: Path, relative: str) -> FileRecord:
    return FileRecord.from_path(root / relative)


def test_partitions_files_into_buckets(tmp_path: Path) -> None:
    files = [
        _record(tmp_path, "Show S01E01.mkv"),
        _record(tmp_path, "show.s01e02.mkv"),
        _record(tmp_path, "Show S01E03.mkv"),
        _record(tmp_path, "Show S01E03 v2.mkv"),
        _record(tmp_path, "Show S05E01.mkv"),
        _record(tmp_path, "readme.mkv"),
        _record(tmp_path, "OVA/Show OVA 01.mkv"),
    ]

    result = _analyzer(tmp_path).analyze(files, _episodes(), "Show", SpecialFolderMatcher())

    assert [item.file_record.original_name for item in result.skip] == ["Show S01E01.mkv"]
    assert [item.target_name for item in result.rename] == ["Show S01E02.mkv"]
    assert list(result.duplicates) == [(1, 3)]
    assert result.duplicate_file_count == 2
    assert [record.original_name for record in result.specials] == ["Show OVA 01.mkv"]
    assert [item.file_record.original_name for item in result.unmatched] == ["Show S05E01.mkv"]
    assert [record.original_name for record in result.unparseable] == ["readme.mkv"]
    assert len(result.warnings) == 2


def test_matched_files_always_have_target_names(tmp_path: Path) -> None:
    files = [_record(tmp_path, f"Show - 0{number}.mkv") for number in range(1, 5)]

    result = _analyzer(tmp_path).analyze(files, _episodes(), "Show")

    for item in [*result.skip, *result.rename]:
        assert item.matched_episode is not None
        assert item.target_name


def test_comparison_is_case_sensitive(tmp_path: Path) -> None:
    files = [_record(tmp_path, "show S01E01.mkv")]

    result = _analyzer(tmp_path).analyze(files, _episodes(), "Show")

    assert result.skip == []
    assert result.rename[0].target_name == "Show S01E01.mkv"


def test_no_fallback_for_missing_episode(tmp_path: Path) -> None:
    files = [_record(tmp_path, "Show S01E09.mkv")]

    result = _analyzer(tmp_path).analyze(files, _episodes(), "Show")

    assert result.skip == []
    assert result.rename == []
    assert result.unmatched[0].parse_result is not None
    assert "S01E09" in result.warnings[0]


def test_special_folder_files_are_not_duplicated(tmp_path: Path) -> None:
    files = [
        _record(tmp_path, "Show S01E01.mkv"),
        _record(tmp_path, "Specials/Show S01E01.mkv"),
    ]

    result = _analyzer(tmp_path).analyze(files, _episodes(), "Show", SpecialFolderMatcher())

    assert result.duplicates == {}
    assert len(result.specials) == 1
    assert len(result.skip) == 1


def test_series_name_falls_back_to_parsed_name(tmp_path: Path) -> None:
    result = _analyzer(tmp_path).analyze([_record(tmp_path, "My.Show.S01E02.mkv")], _episodes())

    assert result.rename[0].target_name == "My Show S01E02.mkv"


def test_season_folder_must_match_for_already_correct(tmp_path: Path) -> None:
    analyzer = _analyzer(tmp_path, season_folder="Season {season:02d}")
    files = [
        _record(tmp_path, "Show S01E01.mkv"),
        _record(tmp_path, "Season 01/Show S01E02.mkv"),
    ]

    result = analyzer.analyze(files, _episodes(), "Show")

    assert [item.file_record.original_name for item in result.skip] == ["Show S01E02.mkv"]
    assert result.rename[0].target_folder == tmp_path / "Season 01"


def test_empty_file_name_is_skipped_with_warning(tmp_path: Path) -> None:
    record = FileRecord(original_path=tmp_path, original_name="")

    result = _analyzer(tmp_path).analyze([record], _episodes(), "Show")

    assert result.unparseable == [record]
    assert "no name" in result.warnings[0]


def test_accepts_prebuilt_episode_index(tmp_path: Path) -> None:
    index = {episode.key: episode for episode in _episodes()}

    result = _analyzer(tmp_path).analyze([_record(tmp_path, "Show 1x04.mkv")], index, "Show")

    assert result.rename[0].target_name == "Show S01E04.mkv"


@pytest.mark.parametrize(
    ("folder", "expected"),
    [
        ("OVA", True),
        ("specials", True),
        ("S01 OVA", True),
        ("Season 2 Specials", True),
        ("Movies", True),
        ("Season 2", False),
        ("Showcase", False),
    ],
)
def test_special_folder_matcher(folder: str, expected: bool) -> None:
    assert SpecialFolderMatcher().matches(folder) is expected


def test_special_folder_matcher_ignores_root_name(tmp_path: Path) -> None:
    root = tmp_path / "Specials"
    matcher = SpecialFolderMatcher()

    assert not matcher.is_special(root / "Show S01E01.mkv", root)
    assert matcher.is_special(root / "OVA" / "Show OVA 01.mkv", root)


def test_special_folder_matcher_without_root_checks_own_folder_only() -> None:
    matcher = SpecialFolderMatcher()

    assert not matcher.is_special(Path("/media/Movies/Show/Show S01E01.mkv"))
    assert matcher.is_special(Path("/media/Movies/Show/OVA/Show OVA 01.mkv"))
    assert not matcher.is_special(
        Path("/media/Movies/Show/Show S01E01.mkv"), Path("/elsewhere")
    )


def test_library_under_special_named_ancestor_is_analyzed(tmp_path: Path) -> None:
    root = tmp_path / "Movies" / "Show"
    files = [_record(root, "Show S01E01.mkv"), _record(root, "show.s01e02.mkv")]
    formatter = NameFormatter(NamingOptions(episode_template=SHORT_TEMPLATE))
    analyzer = StateAnalyzer(PatternParser(), formatter)

    result = analyzer.analyze(files, _episodes(), "Show", SpecialFolderMatcher())

    assert result.specials == []
    assert [item.file_record.original_name for item in result.skip] == ["Show S01E01.mkv"]
    assert [item.target_name for item in result.rename] == ["Show S01E02.mkv"]


class _FailingFormatter(NameFormatter):
    """Formatter that cannot render one particular episode."""

    def render(self, episode, series_name, extension, version=None):  # type: ignore[override]
        if episode.episode_number == 2:
            raise NamingError("template rendered an empty filename")
        return super().render(episode, series_name, extension, version)


def test_one_unrenderable_file_does_not_abort_analysis(tmp_path: Path) -> None:
    files = [_record(tmp_path, "Show S01E01.mkv"), _record(tmp_path, "Show S01E02.mkv")]
    formatter = _FailingFormatter(NamingOptions(episode_template=SHORT_TEMPLATE))
    analyzer = StateAnalyzer(PatternParser(), formatter, root=tmp_path)

    result = analyzer.analyze(files, _episodes(), "Show")

    assert [item.file_record.original_name for item in result.skip] == ["Show S01E01.mkv"]
    assert [record.original_name for record in result.unparseable] == ["Show S01E02.mkv"]
    assert any("could not be classified" in warning for warning in result.warnings)
