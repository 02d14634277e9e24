"""Configuration models describing projopen settings."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProjopenBaseModel(BaseModel):
    """Shared configuration for projopen Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class IDESettings(ProjopenBaseModel):
    """Global editor used when neither the project nor its source names one.

    Attributes:
        path: Application bundle or executable that opens a project directory.
        name: Human-readable editor name.
    """

    path: str = ""
    name: str = ""


class DisplayOptions(ProjopenBaseModel):
    """Presentation preferences for project listings.

    Attributes:
        show_stale_indicator: Whether stale projects are flagged in listings.
        default_grouping: Grouping mode used when `--group` is not supplied.
    """

    show_stale_indicator: bool = True
    default_grouping: Literal["collection", "recency", "flat"] = "collection"


class StorageSettings(ProjopenBaseModel):
    """Location of the persisted JSON documents.

    Attributes:
        support_dir: Directory holding sources, collections, and project settings.
    """

    support_dir: str = "~/.projopen"


class LegacySettings(ProjopenBaseModel):
    """Single-directory preferences carried over from older releases.

    Attributes:
        projects_directory: Directory that used to be the only scan root.
        search_depth: Depth that used to apply to that directory.
    """

    projects_directory: Optional[str] = None
    search_depth: int = Field(default=2, ge=0)


class LoggingSettings(ProjopenBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"


class CLIOptions(ProjopenBaseModel):
    """CLI behavior defaults.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class ProjopenConfig(ProjopenBaseModel):
    """Top-level configuration struct for projopen.

    Attributes:
        ide: Global editor settings.
        display: Listing presentation settings.
        storage: Persistence location settings.
        legacy: Legacy single-directory preferences used for migration.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    ide: IDESettings = Field(default_factory=IDESettings)
    display: DisplayOptions = Field(default_factory=DisplayOptions)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    legacy: LegacySettings = Field(default_factory=LegacySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "ProjopenBaseModel",
    "IDESettings",
    "DisplayOptions",
    "StorageSettings",
    "LegacySettings",
    "LoggingSettings",
    "CLIOptions",
    "ProjopenConfig",
]
