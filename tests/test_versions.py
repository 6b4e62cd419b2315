"""Tests for duplicate version resolution."""

from pathlib import Path

import pytest

from episort.analysis import ClassifiedFile
from episort.config.models import NamingOptions
from episort.ingestion import FileRecord
from episort.metadata import EpisodeMetadata
from episort.naming import NameFormatter
from episort.organization import (
    OperationKind,
    VersionManager,
    VersionResolutionError,
    parse_version,
)

TARGET = "Show S01E01.mkv"
EPISODE = EpisodeMetadata(season_number=1, episode_number=1, title="Pilot")


def _manager() -> VersionManager:
    options = NamingOptions(episode_template="{series} S{season:02d}E{episode:02d}")
    return VersionManager(NameFormatter(options))


def _member(folder: Path, name: str, target: str = TARGET) -> ClassifiedFile:
    return ClassifiedFile(
        file_record=FileRecord.from_path(folder / name),
        matched_episode=EPISODE,
        target_name=target,
        target_folder=folder,
    )


@pytest.mark.parametrize(
    ("stem", "expected"),
    [
        ("Show S01E01 v2", 2),
        ("Show.S01E01.v3", 3),
        ("Show_S01E01_v2", 2),
        ("Show - 05-v4", 4),
        ("Show - 05v2", 2),
        ("Show S01E01 V10 [1080p]", 10),
        ("Show S01E01", None),
        ("Survivor S01E01", None),
        ("Show S01E01 v0", None),
    ],
)
def test_parse_version(stem: str, expected: int | None) -> None:
    assert parse_version(stem) == expected


def test_unmarked_members_get_sequential_versions(tmp_path: Path) -> None:
    members = [_member(tmp_path, name) for name in ("c.mkv", "a.mkv", "b.mkv")]

    operations = _manager().resolve_versions({(1, 1): members})

    assert [op.source_path.name for op in operations] == ["a.mkv", "b.mkv", "c.mkv"]
    assert [op.version for op in operations] == [1, 2, 3]
    assert [op.target_file_name for op in operations] == [
        "Show S01E01.mkv",
        "Show S01E01 v2.mkv",
        "Show S01E01 v3.mkv",
    ]
    assert all(op.kind is OperationKind.VERSION for op in operations)


def test_existing_markers_are_kept_when_free(tmp_path: Path) -> None:
    members = [_member(tmp_path, "Show S01E01.mkv"), _member(tmp_path, "Show S01E01 v2.mkv")]

    operations = _manager().resolve_versions({(1, 1): members})

    assert [op.version for op in operations] == [1, 2]
    assert all(op.kind is OperationKind.SKIP for op in operations)


def test_colliding_markers_take_lowest_free_version(tmp_path: Path) -> None:
    members = [
        _member(tmp_path, "x v2.mkv"),
        _member(tmp_path, "y v2.mkv"),
        _member(tmp_path, "z.mkv"),
    ]

    operations = _manager().resolve_versions({(1, 1): members})
    versions = {op.source_path.name: op.version for op in operations}

    assert versions == {"z.mkv": 1, "x v2.mkv": 2, "y v2.mkv": 3}


def test_versions_are_distinct_for_any_group_size(tmp_path: Path) -> None:
    members = [_member(tmp_path, f"copy {index:02d}.mkv") for index in range(12)]

    operations = _manager().resolve_versions({(1, 1): members})

    assert len(operations) == 12
    assert len({op.version for op in operations}) == 12
    assert len({op.target_file_name for op in operations}) == 12


def test_markers_never_stack(tmp_path: Path) -> None:
    members = [_member(tmp_path, "Show S01E01 v2.mkv"), _member(tmp_path, "Show S01E01 v2 v2.mkv")]

    operations = _manager().resolve_versions({(1, 1): members})

    for op in operations:
        assert "v2 v2" not in op.target_file_name
        assert "v2.v2" not in op.target_file_name


def test_resolution_is_idempotent(tmp_path: Path) -> None:
    manager = _manager()
    members = [_member(tmp_path, name) for name in ("b.mkv", "a v3.mkv", "c.mkv")]

    first = manager.resolve_versions({(1, 1): members})
    renamed = [_member(tmp_path, op.target_file_name) for op in first]
    second = manager.resolve_versions({(1, 1): renamed})

    assert {op.target_file_name for op in second} == {op.target_file_name for op in first}
    assert all(op.kind is OperationKind.SKIP for op in second)


def test_groups_are_processed_in_episode_order(tmp_path: Path) -> None:
    later = EpisodeMetadata(season_number=1, episode_number=2, title="Second")
    group_two = [
        ClassifiedFile(
            file_record=FileRecord.from_path(tmp_path / name),
            matched_episode=later,
            target_name="Show S01E02.mkv",
            target_folder=tmp_path,
        )
        for name in ("d.mkv", "e.mkv")
    ]
    group_one = [_member(tmp_path, "a.mkv"), _member(tmp_path, "b.mkv")]

    operations = _manager().resolve_versions({(1, 2): group_two, (1, 1): group_one})

    assert [op.episode_key for op in operations] == [(1, 1), (1, 1), (1, 2), (1, 2)]


def test_member_without_source_path_raises(tmp_path: Path) -> None:
    orphan = ClassifiedFile(
        file_record=FileRecord(original_path=Path(""), original_name="orphan.mkv"),
        matched_episode=EPISODE,
        target_name=TARGET,
    )

    with pytest.raises(VersionResolutionError):
        _manager().resolve_versions({(1, 1): [orphan, _member(tmp_path, "a.mkv")]})


def test_target_folder_is_applied(tmp_path: Path) -> None:
    season = tmp_path / "Season 01"
    members = [
        ClassifiedFile(
            file_record=FileRecord.from_path(tmp_path / name),
            matched_episode=EPISODE,
            target_name=TARGET,
            target_folder=season,
        )
        for name in ("a.mkv", "b.mkv")
    ]

    operations = _manager().resolve_versions({(1, 1): members})

    assert [op.target_path for op in operations] == [
        season / "Show S01E01.mkv",
        season / "Show S01E01 v2.mkv",
    ]


def test_member_already_holding_target_keeps_it(tmp_path: Path) -> None:
    members = [_member(tmp_path, "Show S01E01 [1080p].mkv"), _member(tmp_path, TARGET)]

    operations = _manager().resolve_versions({(1, 1): members})
    by_source = {op.source_path.name: op for op in operations}

    assert by_source[TARGET].version == 1
    assert by_source[TARGET].kind is OperationKind.SKIP
    assert by_source["Show S01E01 [1080p].mkv"].target_file_name == "Show S01E01 v2.mkv"


def test_no_member_targets_another_members_current_name(tmp_path: Path) -> None:
    names = ["Show S01E01 v3.mkv", "a v3.mkv", "Show S01E01.mkv", "b.mkv", "Show S01E01 v2.mkv"]
    members = [_member(tmp_path, name) for name in names]

    operations = _manager().resolve_versions({(1, 1): members})
    moving = [op for op in operations if op.kind is OperationKind.VERSION]

    assert {op.target_file_name for op in moving}.isdisjoint(names)
    assert len({op.target_file_name for op in operations}) == len(names)


def test_custom_version_template_resolves_stably(tmp_path: Path) -> None:
    options = NamingOptions(
        episode_template="{series} S{season:02d}E{episode:02d}", version_template=" ({version})"
    )
    manager = VersionManager(NameFormatter(options))
    members = [_member(tmp_path, name) for name in ("b.mkv", "a.mkv", "c (3).mkv")]

    first = manager.resolve_versions({(1, 1): members})
    assert {op.target_file_name for op in first} == {
        "Show S01E01.mkv",
        "Show S01E01 (2).mkv",
        "Show S01E01 (3).mkv",
    }

    renamed = [_member(tmp_path, op.target_file_name) for op in first]
    second = manager.resolve_versions({(1, 1): renamed})
    assert all(op.kind is OperationKind.SKIP for op in second)


@pytest.mark.parametrize(
    ("stem", "template", "expected"),
    [
        ("Show S01E01 (2)", " ({version})", 2),
        ("Show S01E01 (2019)", " ({version})", None),
        ("Show S01E01 v4", " ({version})", 4),
        ("Show S01E01 - copy 03", " - copy {version:02d}", 3),
    ],
)
def test_parse_version_reads_template_suffix(
    stem: str, template: str, expected: int | None
) -> None:
    assert parse_version(stem, template) == expected
