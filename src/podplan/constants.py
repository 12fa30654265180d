# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants for prebuild planning."""

from __future__ import annotations

from typing import Final

SUBSPEC_SEPARATOR: Final[str] = "/"
WILDCARD_REQUEST: Final[str] = "*"
EMPTY_REQUEST_STATUS: Final[int] = -1
SUCCESS_STATUS: Final[int] = 0

CONFIG_FILE_NAME: Final[str] = ".podplan.toml"
PYPROJECT_FILE_NAME: Final[str] = "pyproject.toml"
DEFAULT_MANIFEST_NAME: Final[str] = "Podfile"
DEFAULT_LOCKFILE_NAME: Final[str] = "Podfile.lock"
DEFAULT_WORK_DIR_NAME: Final[str] = ".podplan"
DEFAULT_CATALOG_NAME: Final[str] = "catalog.json"

# Lines the application manifest must carry so prebuilt artifacts get wired in.
DEFAULT_POST_INSTALL_ACTIONS: Final[tuple[str, ...]] = (
    "require 'pod_builder/podfile/post_actions'",
    "post_install do |installer|",
    "PodBuilder::PodfileItem::post_install_actions(installer)",
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_CATALOG_NAME",
    "DEFAULT_LOCKFILE_NAME",
    "DEFAULT_MANIFEST_NAME",
    "DEFAULT_POST_INSTALL_ACTIONS",
    "DEFAULT_WORK_DIR_NAME",
    "EMPTY_REQUEST_STATUS",
    "PYPROJECT_FILE_NAME",
    "SUBSPEC_SEPARATOR",
    "SUCCESS_STATUS",
    "WILDCARD_REQUEST",
]
