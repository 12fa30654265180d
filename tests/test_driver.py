# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for sequential group dispatch."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from podplan.config import PrebuildConfig
from podplan.driver import CommandBuildDriver, dispatch_groups, group_payload, parse_licenses
from podplan.errors import ExternalBuildError
from podplan.models import BuildGroup, Package

from .support import RecordingDriver


def _group(kind: str, *names: str) -> BuildGroup:
    packages = tuple(Package(name, build_configuration="debug" if kind == "debug" else "release") for name in names)
    return BuildGroup(kind=kind, initial_members=packages, members=packages)  # type: ignore[arg-type]


def test_groups_are_dispatched_in_order_and_lockfile_removed(tmp_path: Path) -> None:
    driver = RecordingDriver()
    groups = (_group("subspec", "Root/Sub"), _group("debug", "A"), _group("release", "B"))

    report = dispatch_groups(groups, driver, root=tmp_path, lockfile_name="Podfile.lock")

    assert [group.kind for group in driver.groups] == ["subspec", "debug", "release"]
    assert [record.package for record in report.licenses] == ["Root/Sub", "A", "B"]
    assert not (tmp_path / "Podfile.lock").exists()


def test_failure_stops_remaining_groups_and_still_cleans_lockfile(tmp_path: Path) -> None:
    driver = RecordingDriver(fail_kinds={"debug"})
    groups = (_group("debug", "A"), _group("release", "B"))

    with pytest.raises(ExternalBuildError, match="compiler exploded") as excinfo:
        dispatch_groups(groups, driver, root=tmp_path, lockfile_name="Podfile.lock")

    assert excinfo.value.group_kind == "debug"
    assert excinfo.value.members == ("A",)
    assert [group.kind for group in driver.groups] == ["debug"]
    assert not (tmp_path / "Podfile.lock").exists()


def test_driver_exceptions_propagate_after_cleanup(tmp_path: Path) -> None:
    class ExplodingDriver:
        def build(self, group: BuildGroup, *, root: Path) -> None:
            (root / "Podfile.lock").write_text("lock", encoding="utf-8")
            raise ExternalBuildError("toolchain missing")

    with pytest.raises(ExternalBuildError, match="toolchain missing"):
        dispatch_groups((_group("release", "A"),), ExplodingDriver(), root=tmp_path, lockfile_name="Podfile.lock")  # type: ignore[arg-type]
    assert not (tmp_path / "Podfile.lock").exists()


def test_parse_licenses() -> None:
    assert parse_licenses("") == ()
    [record] = parse_licenses('[{"package": "A", "license": "MIT"}]')
    assert (record.package, record.license) == ("A", "MIT")
    with pytest.raises(ExternalBuildError):
        parse_licenses("not json")
    with pytest.raises(ExternalBuildError):
        parse_licenses('{"package": "A"}')
    with pytest.raises(ExternalBuildError):
        parse_licenses('[{"package": "A"}]')


def test_group_payload_describes_members() -> None:
    payload = group_payload(_group("debug", "A"))
    assert payload["kind"] == "debug"
    assert payload["build_configuration"] == "debug"
    assert payload["initial_members"] == ["A"]
    assert payload["members"][0]["name"] == "A"
    assert payload["prebuilt_dependencies"] == []


def test_group_payload_lists_prebuilt_dependencies_separately() -> None:
    app = Package("App", ("Kingfisher",))
    kingfisher = Package("Kingfisher", is_prebuilt=True)
    group = BuildGroup(kind="release", initial_members=(app,), members=(app,), prebuilt_dependencies=(kingfisher,))

    payload = group_payload(group)

    assert [member["name"] for member in payload["members"]] == ["App"]
    assert payload["prebuilt_dependencies"] == ["Kingfisher"]


def test_command_driver_runs_build_command(tmp_path: Path) -> None:
    script = tmp_path / "builder.py"
    script.write_text(
        "import json, sys\n"
        "payload = json.load(open(sys.argv[1]))\n"
        "print(json.dumps([{'package': name, 'license': 'MIT'} for name in payload['initial_members']]))\n",
        encoding="utf-8",
    )
    driver = CommandBuildDriver(command=(sys.executable, str(script)), work_dir=tmp_path / "work")

    result = driver.build(_group("release", "A"), root=tmp_path)

    assert result.success is True
    assert [record.package for record in result.licenses] == ["A"]
    written = json.loads((tmp_path / "work" / "group-1-release.json").read_text(encoding="utf-8"))
    assert written["initial_members"] == ["A"]


def test_command_driver_reports_non_zero_exit(tmp_path: Path) -> None:
    script = tmp_path / "fail.py"
    script.write_text("import sys\nsys.exit(3)\n", encoding="utf-8")
    driver = CommandBuildDriver(command=(sys.executable, str(script)), work_dir=tmp_path / "work")

    result = driver.build(_group("release", "A"), root=tmp_path)

    assert result.success is False
    assert "status 3" in result.message


def test_command_driver_requires_a_command(tmp_path: Path) -> None:
    driver = CommandBuildDriver(command=(), work_dir=tmp_path)
    with pytest.raises(ExternalBuildError, match="No build_command"):
        driver.build(_group("release", "A"), root=tmp_path)


def test_command_driver_runs_project_relative_script_from_elsewhere(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    project = tmp_path / "proj"
    script = project / "scripts" / "build.sh"
    script.parent.mkdir(parents=True)
    script.write_text("#!/bin/sh\necho '[]'\n", encoding="utf-8")
    script.chmod(0o755)
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)
    config = PrebuildConfig(build_command=["scripts/build.sh"]).resolve_paths(project)
    driver = CommandBuildDriver(command=tuple(config.build_command), work_dir=config.work_dir)

    result = driver.build(_group("release", "A"), root=project)

    assert result.success is True
