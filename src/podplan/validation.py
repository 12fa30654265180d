# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Consistency checks run before any build group is dispatched.

Every check is a pure function of the packages involved and the effective
configuration. Fatal findings raise :class:`~podplan.errors.ValidationError`;
checks that may be downgraded return a :class:`~podplan.errors.ValidationWarning`
instead when ``allow_warnings`` is set.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass

from .closure import close
from .config import BuildOptions, PrebuildConfig
from .errors import (
    CHECK_BUILD_CONFIGURATION_ALIGNMENT,
    CHECK_DEVELOPMENT_PODS,
    CHECK_EXISTENCE,
    CHECK_POST_INSTALL_ACTIONS,
    CHECK_SPLIT_SUBSPEC_LINK_SAFETY,
    CheckName,
    ValidationError,
    ValidationWarning,
)
from .manifest import missing_lines
from .models import Package, PackageCatalog

_ALLOW_WARNINGS_HINT = "You can ignore this error by passing the `--allow-warnings` flag to the build command"


@dataclass(frozen=True, slots=True)
class Misalignment:
    """Packages build-coupled to ``package`` that use another build configuration."""

    package: Package
    conflicting: tuple[Package, ...]

    @property
    def names(self) -> tuple[str, ...]:
        """Return the package name followed by every conflicting name."""

        return (self.package.name, *(other.name for other in self.conflicting))

    def describe(self) -> str:
        """Return an actionable message for this misalignment."""

        others = ", ".join(f"{other.name} ({other.build_configuration})" for other in self.conflicting)
        return (
            f"Dependencies of `{self.package.name}` don't have the same build configuration "
            f"({self.package.build_configuration}) as those of {others}"
        )


def _raise_or_warn(
    check: CheckName,
    message: str,
    packages: Sequence[str],
    *,
    allow_warnings: bool,
) -> ValidationWarning:
    if not allow_warnings:
        raise ValidationError(check, f"{message}\n\n{_ALLOW_WARNINGS_HINT}", packages)
    return ValidationWarning(check, message, packages)


def check_catalog_not_empty(catalog: PackageCatalog) -> None:
    """Reject an empty catalog before any name is resolved against it.

    Raises:
        ValidationError: If the catalog has no entries.
    """

    if not len(catalog):
        raise ValidationError(CHECK_EXISTENCE, "Empty Podfile? The package catalog has no entries.")


def check_packages_exist(roots: Sequence[str], catalog: PackageCatalog) -> None:
    """Ensure every resolved root is present in a non-empty catalog.

    Raises:
        ValidationError: If the catalog is empty or a root is unknown.
    """

    check_catalog_not_empty(catalog)
    available = catalog.root_names()
    missing = [name for name in roots if name not in available]
    if missing:
        listing = "\n".join(available)
        raise ValidationError(
            CHECK_EXISTENCE,
            f"Pod `{missing[0]}` wasn't found in Podfile.\n\nFound:\n{listing}",
            missing,
        )


def check_split_subspecs_are_static(
    packages: Iterable[Package],
    subspecs_to_split: Collection[str],
    *,
    allow_warnings: bool,
) -> ValidationWarning | None:
    """Flag configured split subspecs that do not resolve to static binaries.

    Splitting a dynamic subspec over several targets lets the native linker
    duplicate or drop symbols.

    Args:
        packages: Catalog packages to inspect.
        subspecs_to_split: Subspec names configured for isolated linking.
        allow_warnings: Downgrade the failure to a warning when ``True``.

    Returns:
        ValidationWarning | None: Warning when downgraded, otherwise ``None``.
    """

    invalid = [
        package.name
        for package in packages
        if package.is_subspec and not package.is_static and package.name in subspecs_to_split
    ]
    if not invalid:
        return None
    message = (
        f"The following pods `{' '.join(invalid)}` are non static binaries which are being split "
        "over different targets. This is an unsafe setup: the linker may duplicate or drop symbols."
    )
    return _raise_or_warn(CHECK_SPLIT_SUBSPEC_LINK_SAFETY, message, invalid, allow_warnings=allow_warnings)


def check_not_building_development_pods(
    packages: Iterable[Package],
    *,
    allow_building_development_pods: bool,
    allow_warnings: bool,
) -> ValidationWarning | None:
    """Refuse to prebuild packages sourced from local development paths."""

    development = [package.name for package in packages if package.is_development_pod]
    if not development or allow_building_development_pods:
        return None
    message = f"The following pods are in development mode: `{', '.join(development)}`, won't proceed building."
    return _raise_or_warn(CHECK_DEVELOPMENT_PODS, message, development, allow_warnings=allow_warnings)


def _coupled(package: Package, other: Package) -> bool:
    coupling = {name for name in package.dependency_names if not package.has_common_spec(name)}
    coupling.add(package.name)
    return any(name in coupling and not other.has_common_spec(name) for name in other.dependency_names)


def find_misalignments(packages: Sequence[Package]) -> list[Misalignment]:
    """Return every package whose build-coupled peers use another configuration.

    Two packages are coupled when one requires a non-common-spec name that the
    other also requires, or when one requires the other directly. Sibling
    subspecs never couple because they are not separate artifacts.

    Args:
        packages: Packages that take part in the build.

    Returns:
        list[Misalignment]: Findings in package order, empty when aligned.
    """

    findings: list[Misalignment] = []
    for package in packages:
        conflicting = tuple(
            other
            for other in packages
            if other.name != package.name
            and other.build_configuration != package.build_configuration
            and _coupled(package, other)
        )
        if conflicting:
            findings.append(Misalignment(package=package, conflicting=conflicting))
    return findings


def check_build_configurations_aligned(packages: Sequence[Package]) -> None:
    """Raise on the first build-configuration misalignment.

    Raises:
        ValidationError: If coupled packages disagree on build configuration.
    """

    findings = find_misalignments(packages)
    if findings:
        first = findings[0]
        raise ValidationError(CHECK_BUILD_CONFIGURATION_ALIGNMENT, first.describe(), first.names)


def check_post_install_actions(
    manifest_lines: Iterable[str],
    expected: Sequence[str],
    *,
    allow_warnings: bool,
) -> ValidationWarning | None:
    """Ensure the application manifest carries the post-install hook lines."""

    missing = missing_lines(manifest_lines, expected)
    if not missing:
        return None
    listing = "\n".join(missing)
    message = f"Post install actions missing from application Podfile!\n\nMissing:\n{listing}"
    return _raise_or_warn(CHECK_POST_INSTALL_ACTIONS, message, (), allow_warnings=allow_warnings)


def validate_selection(
    catalog: PackageCatalog,
    roots: Sequence[str],
    selected: Sequence[Package],
    *,
    config: PrebuildConfig,
    options: BuildOptions,
    manifest_lines: Sequence[str],
) -> list[ValidationWarning]:
    """Run every catalog-level check in order and collect downgraded findings.

    Args:
        catalog: Full package catalog.
        roots: Resolved root names.
        selected: Packages chosen for building.
        config: Effective project configuration.
        options: Request-scoped switches.
        manifest_lines: Application manifest content.

    Returns:
        list[ValidationWarning]: Warnings emitted in ``allow_warnings`` mode.

    Raises:
        ValidationError: On the first fatal finding.
    """

    check_packages_exist(roots, catalog)
    findings = [
        check_split_subspecs_are_static(
            catalog,
            config.subspecs_to_split,
            allow_warnings=options.allow_warnings,
        ),
        check_not_building_development_pods(
            selected,
            allow_building_development_pods=config.allow_building_development_pods,
            allow_warnings=options.allow_warnings,
        ),
    ]
    check_build_configurations_aligned(close(selected, catalog))
    findings.append(
        check_post_install_actions(
            manifest_lines,
            config.post_install_actions,
            allow_warnings=options.allow_warnings,
        )
    )
    return [finding for finding in findings if finding is not None]


__all__ = [
    "Misalignment",
    "check_build_configurations_aligned",
    "check_catalog_not_empty",
    "check_not_building_development_pods",
    "check_packages_exist",
    "check_post_install_actions",
    "check_split_subspecs_are_static",
    "find_misalignments",
    "validate_selection",
]
