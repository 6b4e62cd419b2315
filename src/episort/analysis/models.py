"""Classification models produced by the state analyzer."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from episort.ingestion.models import FileRecord
from episort.metadata.models import EpisodeKey, EpisodeMetadata
from episort.parsing.models import ParseResult


class ClassifiedFile(BaseModel):
    """A discovered file together with its parsed identity and target name.

    Attributes:
        file_record: The scanned file.
        parse_result: Parsed identity, when a rule matched.
        matched_episode: Metadata entry for the parsed ``(season, episode)``.
        target_name: Rendered canonical filename (without version suffix).
        target_folder: Folder the file belongs in.
        is_already_correct: Whether the file already sits at its target.
    """

    model_config = ConfigDict(frozen=True)

    file_record: FileRecord
    parse_result: Optional[ParseResult] = None
    matched_episode: Optional[EpisodeMetadata] = None
    target_name: str = ""
    target_folder: Optional[Path] = None
    is_already_correct: bool = False

    @model_validator(mode="after")
    def _matched_files_have_targets(self) -> "ClassifiedFile":
        if self.matched_episode is not None and not self.target_name:
            raise ValueError("A matched file must carry a target name.")
        return self

    @property
    def episode_key(self) -> Optional[EpisodeKey]:
        return self.matched_episode.key if self.matched_episode else None


class AnalysisResult(BaseModel):
    """Partition of a file listing produced by ``StateAnalyzer.analyze``.

    Attributes:
        skip: Files already at their canonical name.
        rename: Files that need a rename.
        duplicates: Episode keys claimed by two or more files.
        specials: Files routed to special content by folder.
        unmatched: Parsed files with no metadata entry for their ``(season, episode)``.
        unparseable: Files no rule could classify.
        warnings: Human-readable warnings collected during analysis.
    """

    skip: List[ClassifiedFile] = Field(default_factory=list)
    rename: List[ClassifiedFile] = Field(default_factory=list)
    duplicates: Dict[EpisodeKey, List[ClassifiedFile]] = Field(default_factory=dict)
    specials: List[FileRecord] = Field(default_factory=list)
    unmatched: List[ClassifiedFile] = Field(default_factory=list)
    unparseable: List[FileRecord] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @property
    def duplicate_file_count(self) -> int:
        return sum(len(group) for group in self.duplicates.values())


__all__ = ["AnalysisResult", "ClassifiedFile"]
