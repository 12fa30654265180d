# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Transitive dependency closure over the package catalog."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import Package, PackageCatalog


def close(roots: Iterable[Package], catalog: PackageCatalog) -> tuple[Package, ...]:
    """Return ``roots`` plus every package reachable through dependency edges.

    Traversal is depth-first pre-order, so the result keeps first-seen order.
    Dependency names missing from ``catalog`` are ignored and revisits are cut
    by the visited set, which makes cyclic catalogs safe.

    Args:
        roots: Packages whose dependencies should be followed.
        catalog: Catalog used to look up dependency names.

    Returns:
        tuple[Package, ...]: Closed package set without duplicate names.
    """

    visited: set[str] = set()
    ordered: list[Package] = []
    for root in roots:
        stack: list[Package] = [root]
        while stack:
            package = stack.pop()
            if package.name in visited:
                continue
            visited.add(package.name)
            ordered.append(package)
            # Reverse so the first declared dependency is expanded first.
            for dependency_name in reversed(package.dependency_names):
                dependency = catalog.get(dependency_name)
                if dependency is not None and dependency.name not in visited:
                    stack.append(dependency)
    return tuple(ordered)


def companion_subspecs(selected: Sequence[Package], buildable: Sequence[Package]) -> tuple[Package, ...]:
    """Return buildable subspecs sharing a root with a selected subspec.

    Args:
        selected: Packages already chosen for building.
        buildable: Every package that can be compiled.

    Returns:
        tuple[Package, ...]: Sibling subspecs not yet part of ``selected``.
    """

    selected_names = {package.name for package in selected}
    subspec_roots = {package.root_name for package in selected if package.is_subspec}
    return tuple(
        package
        for package in buildable
        if package.is_subspec and package.root_name in subspec_roots and package.name not in selected_names
    )


def select_packages(root_names: Iterable[str], buildable: Sequence[Package]) -> tuple[Package, ...]:
    """Return buildable packages belonging to ``root_names`` and their companions."""

    wanted = set(root_names)
    selected = tuple(package for package in buildable if package.root_name in wanted)
    return selected + companion_subspecs(selected, buildable)


__all__ = ["close", "companion_subspecs", "select_packages"]
