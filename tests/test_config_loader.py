# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for layered configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from podplan.config import BuildOptions, ConfigError, PrebuildConfig
from podplan.config_loader import ConfigLoader, TomlConfigSource, load_config


def test_load_config_defaults(tmp_path: Path) -> None:
    cfg = load_config(tmp_path)

    assert cfg.subspecs_to_split == []
    assert cfg.allow_building_development_pods is False
    assert cfg.lockfile_name == "Podfile.lock"
    assert cfg.manifest_path == (tmp_path / "Podfile").resolve()
    assert cfg.catalog_path == (tmp_path / ".podplan" / "catalog.json").resolve()


def test_project_file_overrides_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        """
[tool.podplan]
subspecs_to_split = ["Firebase/Core"]
allow_building_development_pods = true
lockfile_name = "From.pyproject"
""".strip(),
        encoding="utf-8",
    )
    (tmp_path / ".podplan.toml").write_text('lockfile_name = "Podfile.lock.tmp"\n', encoding="utf-8")

    cfg = load_config(tmp_path)

    assert cfg.subspecs_to_split == ["Firebase/Core"]
    assert cfg.allow_building_development_pods is True
    assert cfg.lockfile_name == "Podfile.lock.tmp"


def test_includes_and_env_expansion(tmp_path: Path) -> None:
    (tmp_path / "shared.toml").write_text('build_command = ["$BUILDER", "--quiet"]\n', encoding="utf-8")
    (tmp_path / ".podplan.toml").write_text('include = "shared.toml"\nmanifest_path = "ios/Podfile"\n', encoding="utf-8")

    loader = ConfigLoader(
        tmp_path,
        [TomlConfigSource(tmp_path / ".podplan.toml", env={"BUILDER": "/usr/bin/xcb"})],
    )
    cfg = loader.load()

    assert cfg.build_command == ["/usr/bin/xcb", "--quiet"]
    assert cfg.manifest_path == (tmp_path / "ios" / "Podfile").resolve()


def test_circular_include_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "a.toml").write_text('include = "b.toml"\n', encoding="utf-8")
    (tmp_path / "b.toml").write_text('include = "a.toml"\n', encoding="utf-8")

    with pytest.raises(ConfigError, match="Circular include"):
        TomlConfigSource(tmp_path / "a.toml").load()


def test_invalid_values_raise_config_error(tmp_path: Path) -> None:
    (tmp_path / ".podplan.toml").write_text('subspecs_to_split = ["NoSeparator"]\n', encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid podplan configuration"):
        load_config(tmp_path)


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    (tmp_path / ".podplan.toml").write_text("colour = true\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_request_skip_prebuild_update_overrides_config() -> None:
    cfg = PrebuildConfig(skip_prebuild_update=True)
    assert BuildOptions().effective_skip_prebuild_update(cfg) is True
    assert BuildOptions(skip_prebuild_update=False).effective_skip_prebuild_update(cfg) is False


def test_relative_build_command_is_anchored_at_project_root(tmp_path: Path) -> None:
    (tmp_path / ".podplan.toml").write_text('build_command = ["scripts/build.sh", "--fast"]\n', encoding="utf-8")

    cfg = load_config(tmp_path)

    assert cfg.build_command == [str((tmp_path / "scripts" / "build.sh").resolve()), "--fast"]


def test_bare_build_command_is_left_for_path_lookup(tmp_path: Path) -> None:
    (tmp_path / ".podplan.toml").write_text('build_command = ["pod-build", "--fast"]\n', encoding="utf-8")

    assert load_config(tmp_path).build_command == ["pod-build", "--fast"]
