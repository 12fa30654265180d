# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for pre-dispatch consistency checks."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from podplan.config import BuildOptions, PrebuildConfig
from podplan.constants import DEFAULT_POST_INSTALL_ACTIONS
from podplan.errors import ValidationError, ValidationWarning
from podplan.manifest import missing_lines, strip_line
from podplan.models import Package, PackageCatalog
from podplan.validation import (
    check_build_configurations_aligned,
    check_not_building_development_pods,
    check_packages_exist,
    check_post_install_actions,
    check_split_subspecs_are_static,
    find_misalignments,
    validate_selection,
)


def test_existence_rejects_empty_catalog() -> None:
    with pytest.raises(ValidationError, match="Empty Podfile") as excinfo:
        check_packages_exist(["A"], PackageCatalog())
    assert excinfo.value.check == "existence"


def test_existence_lists_available_roots(sample_catalog: PackageCatalog) -> None:
    with pytest.raises(ValidationError) as excinfo:
        check_packages_exist(["Alamofire", "Ghost"], sample_catalog)
    assert excinfo.value.packages == ("Ghost",)
    assert "Found:\nAlamofire" in str(excinfo.value)


def test_split_subspec_must_be_static() -> None:
    packages = [Package("Root"), Package("Root/Sub", is_static=False)]
    assert check_split_subspecs_are_static(packages, [], allow_warnings=False) is None
    with pytest.raises(ValidationError) as excinfo:
        check_split_subspecs_are_static(packages, ["Root/Sub"], allow_warnings=False)
    assert excinfo.value.check == "split-subspec-link-safety"
    assert excinfo.value.packages == ("Root/Sub",)
    assert "--allow-warnings" in str(excinfo.value)


def test_split_subspec_link_safety_downgrades_to_warning() -> None:
    packages = [Package("Root/Sub", is_static=False)]
    warning = check_split_subspecs_are_static(packages, ["Root/Sub"], allow_warnings=True)
    assert isinstance(warning, ValidationWarning)
    assert warning.check == "split-subspec-link-safety"


def test_development_pods_guard() -> None:
    packages = [Package("Local", is_development_pod=True), Package("Remote")]
    with pytest.raises(ValidationError, match="in development mode: `Local`"):
        check_not_building_development_pods(packages, allow_building_development_pods=False, allow_warnings=False)
    assert (
        check_not_building_development_pods(packages, allow_building_development_pods=True, allow_warnings=False)
        is None
    )
    warning = check_not_building_development_pods(
        packages,
        allow_building_development_pods=False,
        allow_warnings=True,
    )
    assert warning is not None and warning.packages == ("Local",)


def test_direct_dependency_with_other_configuration_is_flagged() -> None:
    packages = [Package("A", build_configuration="debug"), Package("B", ("A",), build_configuration="release")]
    with pytest.raises(ValidationError) as excinfo:
        check_build_configurations_aligned(packages)
    assert excinfo.value.check == "build-configuration-alignment"
    assert set(excinfo.value.packages) == {"A", "B"}


def test_shared_dependency_with_other_configuration_is_flagged() -> None:
    packages = [
        Package("Shared"),
        Package("P", ("Shared",), build_configuration="debug"),
        Package("Q", ("Shared",), build_configuration="release"),
    ]
    findings = find_misalignments(packages)
    flagged = {(finding.package.name, other.name) for finding in findings for other in finding.conflicting}
    assert ("P", "Q") in flagged
    assert ("Q", "P") in flagged


def test_alignment_is_detected_in_either_order() -> None:
    p = Package("P", ("Shared",), build_configuration="debug")
    q = Package("Q", ("Shared",), build_configuration="release")
    assert find_misalignments([p, q])
    assert find_misalignments([q, p])


def test_common_spec_dependencies_are_exempt() -> None:
    packages = [
        Package("Root/Core", build_configuration="debug"),
        Package("Root/A", ("Root/Core",), build_configuration="debug"),
        Package("Root/B", ("Root/Core",), build_configuration="release"),
    ]
    assert find_misalignments(packages) == []


def test_aligned_packages_pass() -> None:
    packages = [Package("Shared"), Package("P", ("Shared",)), Package("Q", ("Shared",))]
    check_build_configurations_aligned(packages)


def test_strip_line_normalises_whitespace_and_quotes() -> None:
    assert strip_line('  post_install  do |installer|\t') == "post_installdo|installer|"
    assert strip_line('require "x"') == "require'x'"


def test_missing_lines_ignores_comments() -> None:
    manifest = ["# post_install do |installer|", "require 'pod_builder/podfile/post_actions'"]
    assert missing_lines(manifest, DEFAULT_POST_INSTALL_ACTIONS) == list(DEFAULT_POST_INSTALL_ACTIONS[1:])


def test_post_install_actions_check() -> None:
    with pytest.raises(ValidationError) as excinfo:
        check_post_install_actions([], DEFAULT_POST_INSTALL_ACTIONS, allow_warnings=False)
    assert excinfo.value.check == "post-install-actions"
    assert check_post_install_actions(DEFAULT_POST_INSTALL_ACTIONS, DEFAULT_POST_INSTALL_ACTIONS, allow_warnings=False) is None
    warning = check_post_install_actions([], DEFAULT_POST_INSTALL_ACTIONS, allow_warnings=True)
    assert warning is not None and warning.check == "post-install-actions"


def test_validate_selection_collects_warnings(make_config: Callable[..., PrebuildConfig]) -> None:
    catalog = PackageCatalog([Package("Root"), Package("Root/Sub", is_static=False, is_development_pod=True)])
    config = make_config(subspecs_to_split=["Root/Sub"])

    warnings = validate_selection(
        catalog,
        ("Root",),
        tuple(catalog),
        config=config,
        options=BuildOptions(allow_warnings=True, use_emoji=False),
        manifest_lines=[],
    )

    assert [warning.check for warning in warnings] == [
        "split-subspec-link-safety",
        "development-pods",
        "post-install-actions",
    ]
