# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Split the packages selected for building into build groups."""

from __future__ import annotations

from collections.abc import Collection, Sequence

from .closure import close
from .models import DEBUG, BuildGroup, GroupKind, Package, PackageCatalog


def split_subspecs(selected: Sequence[Package], subspecs_to_split: Collection[str]) -> tuple[Package, ...]:
    """Return selected subspecs configured to be linked in isolation."""

    return tuple(package for package in selected if package.is_subspec and package.name in subspecs_to_split)


def build_roots(selected: Sequence[Package]) -> tuple[Package, ...]:
    """Return selected packages that no other selected package depends on.

    Args:
        selected: Packages chosen for building.

    Returns:
        tuple[Package, ...]: Packages that start a build rather than being
        pulled in through another package's closure.
    """

    dependency_names = {name for package in selected for name in package.dependency_names}
    return tuple(package for package in selected if package.name not in dependency_names)


def partition(
    selected: Sequence[Package],
    subspecs_to_split: Collection[str],
    catalog: PackageCatalog,
) -> tuple[BuildGroup, ...]:
    """Partition ``selected`` into closed build groups.

    Split subspecs each get a singleton group, in selection order, followed by
    one debug group and one release group. Initial memberships are disjoint;
    closure expansion may afterwards repeat a shared dependency in several
    groups. Prebuilt packages reached by the closure are carried as
    ``prebuilt_dependencies`` and never become members.

    Args:
        selected: Packages chosen for building, in catalog order.
        subspecs_to_split: Subspec names that must be built in isolation.
        catalog: Full catalog used to close each group.

    Returns:
        tuple[BuildGroup, ...]: Non-empty groups in dispatch order.
    """

    isolated = split_subspecs(selected, subspecs_to_split)
    isolated_names = {package.name for package in isolated}
    remaining = [package for package in build_roots(selected) if package.name not in isolated_names]
    debug = tuple(package for package in remaining if package.build_configuration == DEBUG)
    release = tuple(package for package in remaining if package.build_configuration != DEBUG)

    initial: list[tuple[GroupKind, tuple[Package, ...]]] = [("subspec", (package,)) for package in isolated]
    initial.append(("debug", debug))
    initial.append(("release", release))
    return tuple(_closed_group(kind, members, catalog) for kind, members in initial if members)


def _closed_group(kind: GroupKind, initial_members: tuple[Package, ...], catalog: PackageCatalog) -> BuildGroup:
    closed = close(initial_members, catalog)
    return BuildGroup(
        kind=kind,
        initial_members=initial_members,
        members=tuple(package for package in closed if not package.is_prebuilt),
        prebuilt_dependencies=tuple(package for package in closed if package.is_prebuilt),
    )


__all__ = ["build_roots", "partition", "split_subspecs"]
