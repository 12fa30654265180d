# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Test doubles and file builders shared across the suite."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from podplan.constants import DEFAULT_POST_INSTALL_ACTIONS
from podplan.driver import BuildResult
from podplan.models import BuildGroup, LicenseRecord


def write_manifest(root: Path, lines: Sequence[str] = DEFAULT_POST_INSTALL_ACTIONS) -> Path:
    """Write an application Podfile carrying ``lines`` under ``root``."""

    manifest = root / "Podfile"
    body = ["platform :ios, '14.0'", "", "target 'App' do", "  pod 'Alamofire'", "end", "", *lines, "end"]
    manifest.write_text("\n".join(body) + "\n", encoding="utf-8")
    return manifest


def write_catalog(path: Path, packages: Sequence[dict[str, object]]) -> Path:
    """Write a catalog JSON document listing ``packages``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"packages": list(packages)}), encoding="utf-8")
    return path


@dataclass
class RecordingDriver:
    """Build driver double recording every dispatched group."""

    lockfile_name: str = "Podfile.lock"
    fail_kinds: set[str] = field(default_factory=set)
    groups: list[BuildGroup] = field(default_factory=list)
    lock_seen: list[bool] = field(default_factory=list)

    def build(self, group: BuildGroup, *, root: Path) -> BuildResult:
        lockfile = root / self.lockfile_name
        self.lock_seen.append(lockfile.exists())
        self.groups.append(group)
        lockfile.write_text("lock", encoding="utf-8")
        if group.kind in self.fail_kinds:
            return BuildResult(success=False, message="compiler exploded")
        licenses = tuple(LicenseRecord(package=package.name, license="MIT") for package in group.initial_members)
        return BuildResult(success=True, licenses=licenses)
