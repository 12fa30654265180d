# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data structures describing catalog packages, build groups and plans."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Final, Literal

from .constants import SUBSPEC_SEPARATOR
from .errors import CatalogError, UnresolvedNameWarning, ValidationWarning

BuildConfiguration = Literal["debug", "release"]
GroupKind = Literal["subspec", "debug", "release"]

DEBUG: Final[BuildConfiguration] = "debug"
RELEASE: Final[BuildConfiguration] = "release"


def root_name_of(name: str) -> str:
    """Return ``name`` without its subspec qualifier.

    Args:
        name: Package name, optionally of the form ``Root/Sub``.

    Returns:
        str: Substring preceding the first subspec separator.
    """

    return name.split(SUBSPEC_SEPARATOR, 1)[0]


@dataclass(frozen=True, slots=True)
class Package:
    """Single catalog entry produced by the manifest analyser."""

    name: str
    dependency_names: tuple[str, ...] = ()
    build_configuration: BuildConfiguration = RELEASE
    is_static: bool = True
    is_prebuilt: bool = False
    is_development_pod: bool = False
    is_subspec: bool | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "dependency_names", tuple(dict.fromkeys(self.dependency_names)))
        if self.is_subspec is None:
            object.__setattr__(self, "is_subspec", SUBSPEC_SEPARATOR in self.name)

    @property
    def root_name(self) -> str:
        """Return the package name without its subspec suffix."""

        return root_name_of(self.name)

    def has_common_spec(self, other_name: str) -> bool:
        """Return ``True`` when ``other_name`` shares this package's root.

        Args:
            other_name: Package name to compare against.

        Returns:
            bool: ``True`` for sibling subspecs (and the root itself).
        """

        return root_name_of(other_name) == self.root_name


class PackageCatalog:
    """Read-only arena of packages indexed by name, preserving catalog order."""

    def __init__(self, packages: Iterable[Package] = ()) -> None:
        """Index ``packages`` by name.

        Args:
            packages: Packages in catalog order.

        Raises:
            CatalogError: If two packages share the same name.
        """

        self._packages: dict[str, Package] = {}
        for package in packages:
            if package.name in self._packages:
                raise CatalogError(f"Duplicate package '{package.name}' in catalog")
            self._packages[package.name] = package

    def __iter__(self) -> Iterator[Package]:
        return iter(self._packages.values())

    def __len__(self) -> int:
        return len(self._packages)

    def __contains__(self, name: object) -> bool:
        return name in self._packages

    def get(self, name: str) -> Package | None:
        """Return the package registered as ``name`` when present."""

        return self._packages.get(name)

    def root_names(self) -> tuple[str, ...]:
        """Return unique root names in first-seen catalog order."""

        return tuple(dict.fromkeys(package.root_name for package in self))

    def buildable(self) -> tuple[Package, ...]:
        """Return packages that still need to be compiled."""

        return tuple(package for package in self if not package.is_prebuilt)

    def prebuilt(self) -> tuple[Package, ...]:
        """Return packages that already have a precompiled artifact."""

        return tuple(package for package in self if package.is_prebuilt)

    def with_roots(self, root_names: Iterable[str]) -> tuple[Package, ...]:
        """Return catalog packages whose root name is in ``root_names``."""

        wanted = set(root_names)
        return tuple(package for package in self if package.root_name in wanted)


@dataclass(frozen=True, slots=True)
class BuildGroup:
    """Packages compiled together in one external build invocation."""

    kind: GroupKind
    initial_members: tuple[Package, ...]
    members: tuple[Package, ...]
    prebuilt_dependencies: tuple[Package, ...] = ()

    @property
    def build_configuration(self) -> BuildConfiguration:
        """Return the configuration shared by the group's initial members."""

        return self.initial_members[0].build_configuration

    @property
    def names(self) -> tuple[str, ...]:
        """Return the names of every closed member."""

        return tuple(package.name for package in self.members)

    @property
    def prebuilt_names(self) -> tuple[str, ...]:
        """Return the names of prebuilt packages the members link against."""

        return tuple(package.name for package in self.prebuilt_dependencies)


@dataclass(frozen=True, slots=True)
class LicenseRecord:
    """License metadata returned by the build driver for a compiled package."""

    package: str
    license: str


@dataclass(slots=True)
class BuildPlan:
    """Validated prebuild plan ready to be dispatched group by group."""

    requested: tuple[str, ...]
    resolved_roots: tuple[str, ...] = ()
    unresolved: tuple[str, ...] = ()
    selected: tuple[Package, ...] = ()
    prebuilt_to_install: tuple[Package, ...] = ()
    groups: tuple[BuildGroup, ...] = ()
    warnings: list[ValidationWarning | UnresolvedNameWarning] = field(default_factory=list)
    catalog: PackageCatalog | None = field(default=None, repr=False, compare=False)

    @property
    def built(self) -> tuple[Package, ...]:
        """Return the initial members of every group in dispatch order."""

        return tuple(package for group in self.groups for package in group.initial_members)


@dataclass(slots=True)
class BuildOutcome:
    """Result of a prebuild run including downstream bookkeeping."""

    status: int
    plan: BuildPlan | None = None
    licenses: list[LicenseRecord] = field(default_factory=list)
    restorable: tuple[Package, ...] = ()
    update_prebuilt: bool = True

    @property
    def warnings(self) -> Sequence[ValidationWarning | UnresolvedNameWarning]:
        """Return warnings collected while planning."""

        return self.plan.warnings if self.plan is not None else ()


__all__ = [
    "DEBUG",
    "RELEASE",
    "BuildConfiguration",
    "BuildGroup",
    "BuildOutcome",
    "BuildPlan",
    "GroupKind",
    "LicenseRecord",
    "Package",
    "PackageCatalog",
    "root_name_of",
]
