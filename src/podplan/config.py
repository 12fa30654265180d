# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for selective prebuild planning."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    DEFAULT_CATALOG_NAME,
    DEFAULT_LOCKFILE_NAME,
    DEFAULT_MANIFEST_NAME,
    DEFAULT_POST_INSTALL_ACTIONS,
    DEFAULT_WORK_DIR_NAME,
    SUBSPEC_SEPARATOR,
)


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class PrebuildConfig(BaseModel):
    """Project-level settings that shape how prebuild groups are planned."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    subspecs_to_split: list[str] = Field(default_factory=list)
    allow_building_development_pods: bool = False
    skip_prebuild_update: bool = False
    manifest_path: Path = Path(DEFAULT_MANIFEST_NAME)
    lockfile_name: str = DEFAULT_LOCKFILE_NAME
    post_install_actions: list[str] = Field(default_factory=lambda: list(DEFAULT_POST_INSTALL_ACTIONS))
    work_dir: Path = Path(DEFAULT_WORK_DIR_NAME)
    catalog_path: Path = Path(DEFAULT_WORK_DIR_NAME) / DEFAULT_CATALOG_NAME
    build_command: list[str] = Field(default_factory=list)

    @field_validator("subspecs_to_split")
    @classmethod
    def _require_qualified_subspecs(cls, value: list[str]) -> list[str]:
        invalid = [name for name in value if SUBSPEC_SEPARATOR not in name]
        if invalid:
            raise ValueError(f"subspecs_to_split entries must be 'Root/Sub' names: {', '.join(invalid)}")
        return list(dict.fromkeys(value))

    def resolve_paths(self, root: Path) -> PrebuildConfig:
        """Return a copy with relative paths anchored at ``root``.

        A ``build_command`` executable given as a relative path (for example
        ``scripts/build.sh``) is anchored too; bare names are left for ``PATH``
        lookup.

        Args:
            root: Project root that relative configuration paths refer to.

        Returns:
            PrebuildConfig: Configuration whose path fields are absolute.
        """

        updates: dict[str, object] = {}
        for name in ("manifest_path", "work_dir", "catalog_path"):
            value: Path = getattr(self, name)
            updates[name] = value if value.is_absolute() else (root / value).resolve()
        if self.build_command and _is_relative_path(self.build_command[0]):
            head, *rest = self.build_command
            updates["build_command"] = [str((root / head).resolve()), *rest]
        return self.model_copy(update=updates)

    def to_dict(self) -> dict[str, object]:
        """Return a dictionary representation suitable for serialization."""

        return dict(self.model_dump(mode="python"))


def _is_relative_path(executable: str) -> bool:
    separators = [sep for sep in (os.sep, os.altsep) if sep]
    return not Path(executable).is_absolute() and any(sep in executable for sep in separators)


@dataclass(frozen=True, slots=True)
class BuildOptions:
    """Request-scoped switches supplied with a single build invocation."""

    allow_warnings: bool = False
    skip_prebuild_update: bool | None = None
    use_emoji: bool = True

    def effective_skip_prebuild_update(self, config: PrebuildConfig) -> bool:
        """Return the request override when given, otherwise the configured default."""

        if self.skip_prebuild_update is None:
            return config.skip_prebuild_update
        return self.skip_prebuild_update


__all__ = ["BuildOptions", "ConfigError", "PrebuildConfig"]
