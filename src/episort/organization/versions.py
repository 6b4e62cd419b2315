"""Version assignment for files that claim the same episode."""

from __future__ import annotations

import logging
import re
from typing import Mapping, Optional, Sequence

from episort.analysis.models import ClassifiedFile
from episort.metadata.models import EpisodeKey
from episort.naming.formatter import NameFormatter, version_suffix_pattern

from .errors import VersionResolutionError
from .models import Operation, OperationKind

LOGGER = logging.getLogger(__name__)

_VERSION_MARKER = re.compile(r"(?<![A-Za-z])[vV](\d{1,2})(?=$|[\s._\-\[\]\(\)])")


def parse_version(stem: str, version_template: Optional[str] = None) -> Optional[int]:
    """Return the version ``stem`` carries, if any.

    A suffix written by ``version_template`` is read first so custom templates
    such as ``" ({version})"`` round-trip; otherwise the last loose ``v<N>``
    marker counts.
    """
    if version_template:
        match = version_suffix_pattern(version_template).search(stem)
        if match and int(match.group(1)) >= 1:
            return int(match.group(1))
    markers = list(_VERSION_MARKER.finditer(stem.rstrip()))
    if not markers:
        return None
    version = int(markers[-1].group(1))
    return version if version >= 1 else None


class VersionManager:
    """Give every member of a duplicate group a distinct, stable version.

    A file already named exactly as the target for some version holds that
    version, so nothing is ever moved onto a file that stays put. Other files
    keep a free version marker of their own, or claim version 1 when unmarked.
    Files whose claim collides take the lowest free version from 2 upwards.
    Targets are always rendered from the base target name, so markers never
    stack and running the resolver on its own output yields the same assignment.
    """

    def __init__(self, formatter: NameFormatter) -> None:
        self.formatter = formatter

    def resolve_versions(
        self,
        duplicate_groups: Mapping[EpisodeKey, Sequence[ClassifiedFile]],
    ) -> list[Operation]:
        """Return one operation per duplicate member, groups in episode order."""
        operations: list[Operation] = []
        for key in sorted(duplicate_groups):
            operations.extend(self.resolve_group(key, duplicate_groups[key]))
        return operations

    def resolve_group(self, key: EpisodeKey, members: Sequence[ClassifiedFile]) -> list[Operation]:
        for member in members:
            source = member.file_record.original_path
            if str(source) in ("", "."):
                raise VersionResolutionError(
                    f"Duplicate member {member.file_record.original_name!r} for "
                    f"S{key[0]:02d}E{key[1]:02d} has no source path."
                )
            if not member.target_name:
                raise VersionResolutionError(
                    f"Duplicate member {source} for S{key[0]:02d}E{key[1]:02d} has no target name."
                )

        claims = [self._claim(member) for member in members]
        claims.sort(
            key=lambda item: (
                not item[0],
                item[1],
                item[2].file_record.original_name,
                str(item[2].file_record.original_path),
            )
        )

        used: set[int] = set()
        assigned: list[Optional[int]] = []
        for _, claim, _ in claims:
            if claim in used:
                assigned.append(None)
            else:
                used.add(claim)
                assigned.append(claim)

        for index, (_, claim, member) in enumerate(claims):
            if assigned[index] is not None:
                continue
            version = 2
            while version in used:
                version += 1
            used.add(version)
            assigned[index] = version
            LOGGER.info(
                "%s: version %d already taken for S%02dE%02d; assigned version %d.",
                member.file_record.original_name,
                claim,
                key[0],
                key[1],
                version,
            )

        operations: list[Operation] = []
        for (_, _, member), version in zip(claims, assigned):
            operations.append(self._build_operation(key, member, version or 1))
        return operations

    def _claim(self, member: ClassifiedFile) -> tuple[bool, int, ClassifiedFile]:
        """Return ``(holds_target, version, member)`` for sorting and assignment."""
        record = member.file_record
        target_folder = member.target_folder or record.original_path.parent
        if record.original_path.parent == target_folder:
            held = self.formatter.held_version(
                record.original_name, member.target_name, record.extension
            )
            if held is not None:
                return True, held, member
        template = self.formatter.convention.version_template
        return False, parse_version(record.stem, template) or 1, member

    def _build_operation(self, key: EpisodeKey, member: ClassifiedFile, version: int) -> Operation:
        record = member.file_record
        target_name = self.formatter.apply_version(member.target_name, record.extension, version)
        target_folder = member.target_folder or record.original_path.parent
        in_place = (
            record.original_name == target_name and record.original_path.parent == target_folder
        )
        return Operation(
            kind=OperationKind.SKIP if in_place else OperationKind.VERSION,
            source_path=record.original_path,
            target_file_name=target_name,
            target_folder=target_folder,
            episode_key=key,
            version=version,
        )


__all__ = ["VersionManager", "parse_version"]
