"""Pydantic schemas for Coop configuration files.

This module defines the data models for:
- addons.yaml / addons.json (project configuration)
- AddonSpec (one configured addon, as handed to the engine)
"""

from pathlib import PurePosixPath
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Common Types
# =============================================================================

CopyStrategyName = Literal["auto", "rsync", "robocopy", "python"]

ROOT_SUBFOLDER = "/"
DEFAULT_CHECKOUT = "main"


def _validate_addon_name(name: str) -> str:
    """Addon names double as directory names in the cache and install roots."""
    if not name or not name.strip():
        raise ValueError("Addon name cannot be empty")
    if "/" in name or "\\" in name:
        raise ValueError(f"Addon name must not contain path separators: {name!r}")
    if name in (".", ".."):
        raise ValueError(f"Invalid addon name: {name!r}")
    return name


def _validate_subfolder(subfolder: str) -> str:
    if ".." in PurePosixPath(subfolder.replace("\\", "/")).parts:
        raise ValueError(f"Subfolder must stay inside the addon source: {subfolder!r}")
    return subfolder


# =============================================================================
# Addon Models
# =============================================================================


class AddonEntry(BaseModel):
    """An addon entry as written in the project configuration.

    - url: Git URL of the addon's repository (required)
    - checkout: Branch, tag or commit to install (default: "main")
    - subfolder: Path within the repository to install (default: "/", whole tree)
    """

    url: str
    checkout: str = DEFAULT_CHECKOUT
    subfolder: str = ROOT_SUBFOLDER

    @field_validator("url", "checkout")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Value cannot be empty")
        return v.strip()

    @field_validator("subfolder")
    @classmethod
    def validate_subfolder(cls, v: str) -> str:
        return _validate_subfolder(v)


class AddonSpec(BaseModel):
    """A fully specified addon handed to the cache and sync engine."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    checkout: str = DEFAULT_CHECKOUT
    subfolder: str = ROOT_SUBFOLDER

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _validate_addon_name(v)

    @field_validator("subfolder")
    @classmethod
    def validate_subfolder(cls, v: str) -> str:
        return _validate_subfolder(v)

    @classmethod
    def from_entry(cls, name: str, entry: AddonEntry) -> "AddonSpec":
        return cls(name=name, url=entry.url, checkout=entry.checkout, subfolder=entry.subfolder)

    def __str__(self) -> str:
        return f"{self.name}@{self.checkout}"


# =============================================================================
# Project Configuration (addons.yaml)
# =============================================================================


class ProjectConfig(BaseModel):
    """Project configuration (addons.yaml / addons.json) schema."""

    path: str = "addons"  # Install root, relative to the project root
    cache: str = ".addons"  # Cache root, relative to the project root
    copy_strategy: CopyStrategyName = "auto"
    addons: dict[str, AddonEntry] = Field(default_factory=dict)

    @field_validator("path", "cache")
    @classmethod
    def validate_directory(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Directory cannot be empty")
        return v

    @field_validator("addons")
    @classmethod
    def validate_addon_names(cls, v: dict[str, AddonEntry]) -> dict[str, AddonEntry]:
        for name in v:
            _validate_addon_name(name)
        return v

    def get_addon_specs(self) -> list[AddonSpec]:
        """Build engine specs for every configured addon, in file order."""
        return [AddonSpec.from_entry(name, entry) for name, entry in self.addons.items()]
