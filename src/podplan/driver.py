# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Sequential hand-off of build groups to the external build step."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from .errors import ExternalBuildError
from .models import BuildGroup, LicenseRecord
from .process_utils import SubprocessExecutionError, run_command


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Outcome reported by a build driver for one group."""

    success: bool
    licenses: tuple[LicenseRecord, ...] = ()
    message: str = ""


class BuildDriver(Protocol):
    """External collaborator compiling one build group at a time."""

    def build(self, group: BuildGroup, *, root: Path) -> BuildResult:
        """Build every member of ``group`` under its build configuration."""
        ...


@dataclass(slots=True)
class DispatchReport:
    """Licenses gathered from every successfully built group."""

    licenses: list[LicenseRecord] = field(default_factory=list)


def dispatch_groups(
    groups: Sequence[BuildGroup],
    driver: BuildDriver,
    *,
    root: Path,
    lockfile_name: str,
) -> DispatchReport:
    """Hand ``groups`` to ``driver`` strictly one after the other.

    The lock artifact the build step leaves behind is removed after every
    group whether or not the build succeeded. Output of a failed group is
    left in place.

    Args:
        groups: Finalised groups in dispatch order.
        driver: Build step invoked for each group.
        root: Project root the build runs in.
        lockfile_name: Lock artifact created by the build step, relative to ``root``.

    Returns:
        DispatchReport: Licenses collected from every group.

    Raises:
        ExternalBuildError: If the driver reports a failure; later groups are skipped.
    """

    report = DispatchReport()
    lockfile = root / lockfile_name
    for group in groups:
        try:
            result = driver.build(group, root=root)
        finally:
            lockfile.unlink(missing_ok=True)
        if not result.success:
            detail = f": {result.message}" if result.message else ""
            raise ExternalBuildError(
                f"Build of {group.kind} group ({', '.join(group.names)}) failed{detail}",
                group_kind=group.kind,
                members=group.names,
            )
        report.licenses.extend(result.licenses)
    return report


def group_payload(group: BuildGroup) -> dict[str, Any]:
    """Return the JSON document describing ``group`` to the build command."""

    return {
        "kind": group.kind,
        "build_configuration": group.build_configuration,
        "initial_members": [package.name for package in group.initial_members],
        "members": [
            {
                "name": package.name,
                "root_name": package.root_name,
                "dependencies": list(package.dependency_names),
                "is_subspec": package.is_subspec,
                "is_static": package.is_static,
            }
            for package in group.members
        ],
        "prebuilt_dependencies": list(group.prebuilt_names),
    }


def parse_licenses(stdout: str) -> tuple[LicenseRecord, ...]:
    """Decode license records printed by the build command.

    Raises:
        ExternalBuildError: If non-empty output is not a JSON array of records.
    """

    if not stdout.strip():
        return ()
    try:
        payload = json.loads(stdout)
    except json.JSONDecodeError as exc:
        raise ExternalBuildError(f"Build command printed invalid license JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise ExternalBuildError("Build command must print a JSON array of license records")
    records: list[LicenseRecord] = []
    for entry in payload:
        if not isinstance(entry, dict) or "package" not in entry or "license" not in entry:
            raise ExternalBuildError(f"Malformed license record: {entry!r}")
        records.append(LicenseRecord(package=str(entry["package"]), license=str(entry["license"])))
    return tuple(records)


@dataclass(slots=True)
class CommandBuildDriver:
    """Run a configured external command once per build group.

    The group is written as JSON under ``work_dir`` and its path is appended
    to ``command``. A zero exit status means success.
    """

    command: Sequence[str]
    work_dir: Path
    timeout: float | None = None
    _invocations: int = field(default=0, init=False, repr=False)

    def build(self, group: BuildGroup, *, root: Path) -> BuildResult:
        if not self.command:
            raise ExternalBuildError("No build_command configured", group_kind=group.kind, members=group.names)
        self._invocations += 1
        self.work_dir.mkdir(parents=True, exist_ok=True)
        payload_path = self.work_dir / f"group-{self._invocations}-{group.kind}.json"
        payload_path.write_text(json.dumps(group_payload(group), indent=2), encoding="utf-8")
        try:
            completed = run_command([*self.command, str(payload_path)], cwd=root, timeout=self.timeout)
        except SubprocessExecutionError as exc:
            return BuildResult(success=False, message=str(exc))
        except FileNotFoundError as exc:
            raise ExternalBuildError(str(exc), group_kind=group.kind, members=group.names) from exc
        return BuildResult(success=True, licenses=parse_licenses(completed.stdout))


__all__ = [
    "BuildDriver",
    "BuildResult",
    "CommandBuildDriver",
    "DispatchReport",
    "dispatch_groups",
    "group_payload",
    "parse_licenses",
]
