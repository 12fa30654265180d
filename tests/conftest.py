# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from podplan.config import PrebuildConfig
from podplan.models import Package, PackageCatalog

from .support import RecordingDriver, write_manifest


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Return a project root containing a valid application manifest."""

    root = tmp_path / "app"
    root.mkdir()
    write_manifest(root)
    return root


@pytest.fixture
def make_config(project_root: Path) -> Callable[..., PrebuildConfig]:
    """Return a factory producing configurations anchored at ``project_root``."""

    def _factory(**overrides: object) -> PrebuildConfig:
        return PrebuildConfig.model_validate(overrides).resolve_paths(project_root)

    return _factory


@pytest.fixture
def driver() -> RecordingDriver:
    return RecordingDriver()


@pytest.fixture
def sample_catalog() -> PackageCatalog:
    """Return a small catalog with subspecs, shared dependencies and a prebuilt pod."""

    return PackageCatalog(
        [
            Package("Alamofire", build_configuration="release"),
            Package("Firebase/Core", ("FirebaseCoreInternal", "GoogleUtilities")),
            Package("Firebase/Analytics", ("Firebase/Core", "GoogleUtilities")),
            Package("FirebaseCoreInternal", ("GoogleUtilities",)),
            Package("GoogleUtilities"),
            Package("Kingfisher", is_prebuilt=True),
            Package("SnapKit", build_configuration="debug"),
        ]
    )
