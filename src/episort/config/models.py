"""Configuration models describing episort settings."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_VIDEO_EXTENSIONS = [
    ".mkv",
    ".mp4",
    ".avi",
    ".m4v",
    ".mov",
    ".wmv",
    ".flv",
    ".webm",
    ".ts",
    ".m2ts",
    ".mpg",
    ".mpeg",
    ".ogm",
]

DEFAULT_SPECIAL_FOLDERS = [
    "OVA",
    "OVAs",
    "OAD",
    "OADs",
    "Special",
    "Specials",
    "Extra",
    "Extras",
    "Movie",
    "Movies",
]


class EpisortBaseModel(BaseModel):
    """Shared configuration for episort Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class MetadataSettings(EpisortBaseModel):
    """Remote episode database settings.

    Attributes:
        api_key: TheTVDB v4 API key used to request a bearer token.
        base_url: API root for the episode database.
        timeout_seconds: Per-request timeout applied to HTTP calls.
    """

    api_key: Optional[str] = None
    base_url: str = "https://api4.thetvdb.com/v4"
    timeout_seconds: float = 10.0


class NamingOptions(EpisortBaseModel):
    """Naming convention used to render canonical episode filenames.

    Attributes:
        episode_template: Template for regular episodes (`series`, `season`, `episode`, `title`).
        special_template: Template for season-0 content.
        version_template: Suffix appended for duplicate versions 2 and above.
        season_folder: Optional folder template; empty keeps files in their current folder.
        specials_folder: Folder used for season-0 content when season folders are enabled.
    """

    episode_template: str = "{series} - S{season:02d}E{episode:02d} - {title}"
    special_template: str = "{series} - S00E{episode:02d} - {title}"
    version_template: str = " v{version}"
    season_folder: str = ""
    specials_folder: str = "Specials"


class ScanningOptions(EpisortBaseModel):
    """Options governing video discovery and special-content routing.

    Attributes:
        video_extensions: File extensions treated as video files.
        excluded_folders: Folder names never descended into during scanning.
        special_folders: Folder names whose contents are treated as special content.
        include_hidden: Whether hidden files and folders are scanned.
        follow_symlinks: Whether symbolic links are followed.
    """

    video_extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_VIDEO_EXTENSIONS))
    excluded_folders: List[str] = Field(default_factory=lambda: ["Extras"])
    special_folders: List[str] = Field(default_factory=lambda: list(DEFAULT_SPECIAL_FOLDERS))
    include_hidden: bool = False
    follow_symlinks: bool = False


class ParsingOptions(EpisortBaseModel):
    """Filename parsing options.

    Attributes:
        max_filename_length: Number of characters of a filename considered by the parser.
        debug: Emit per-rule debug logging while parsing.
    """

    max_filename_length: int = Field(default=255, ge=16)
    debug: bool = False


class LoggingSettings(EpisortBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        rename_log: Whether executed plans are appended to the library rename log.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: str = "WARNING"
    rename_log: bool = True
    max_size_mb: int = 10
    backup_count: int = 5


class CLIOptions(EpisortBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
        confirm_default: Whether `rename` asks for confirmation before executing.
    """

    quiet_default: bool = False
    summary_default: bool = False
    confirm_default: bool = True


class EpisortConfig(EpisortBaseModel):
    """Top-level configuration struct for episort.

    Attributes:
        metadata: Remote episode database settings.
        naming: Naming convention settings.
        scanning: Discovery settings.
        parsing: Filename parser settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    metadata: MetadataSettings = Field(default_factory=MetadataSettings)
    naming: NamingOptions = Field(default_factory=NamingOptions)
    scanning: ScanningOptions = Field(default_factory=ScanningOptions)
    parsing: ParsingOptions = Field(default_factory=ParsingOptions)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "DEFAULT_SPECIAL_FOLDERS",
    "DEFAULT_VIDEO_EXTENSIONS",
    "EpisortBaseModel",
    "MetadataSettings",
    "NamingOptions",
    "ScanningOptions",
    "ParsingOptions",
    "LoggingSettings",
    "CLIOptions",
    "EpisortConfig",
]
