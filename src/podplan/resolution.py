# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Map requested package names onto catalog root packages."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .constants import SUBSPEC_SEPARATOR, WILDCARD_REQUEST
from .errors import CHECK_SUBSPEC_ARGUMENT, UnresolvedNameWarning, UsageError
from .models import PackageCatalog, root_name_of


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of resolving requested names against a catalog."""

    roots: tuple[str, ...]
    unresolved: tuple[str, ...] = ()

    @property
    def warnings(self) -> tuple[UnresolvedNameWarning, ...]:
        """Return one skip warning per unresolved name."""

        return tuple(UnresolvedNameWarning(name) for name in self.unresolved)


def check_not_requesting_subspecs(requested: Sequence[str]) -> None:
    """Reject subspec-qualified request tokens.

    Args:
        requested: Package names supplied by the caller.

    Raises:
        UsageError: If any token contains the subspec separator.
    """

    for name in requested:
        if SUBSPEC_SEPARATOR in name:
            suggestion = " ".join(dict.fromkeys(root_name_of(token) for token in requested))
            raise UsageError(
                f"Can't build subspec {name}, refer to the podspec name.\n\n"
                f"Use `podplan build {suggestion}` instead",
                check=CHECK_SUBSPEC_ARGUMENT,
            )


def resolve(requested: Sequence[str], catalog: PackageCatalog) -> Resolution:
    """Resolve ``requested`` tokens to catalog root names.

    Exact root-name matches are kept, then the roots of their direct
    dependencies are appended. Anything that does not exist in the catalog is
    reported as unresolved instead of failing the run.

    Args:
        requested: Package names supplied by the caller; ``*`` selects every root.
        catalog: Catalog of discoverable packages.

    Returns:
        Resolution: Resolved root names in request order plus unresolved names.

    Raises:
        UsageError: If a token names a subspec or nothing could be resolved.
    """

    check_not_requesting_subspecs(requested)
    catalog_roots = catalog.root_names()
    if WILDCARD_REQUEST in requested:
        extra = [name for name in requested if name != WILDCARD_REQUEST]
        candidates = list(dict.fromkeys([*catalog_roots, *extra]))
    else:
        candidates = list(dict.fromkeys(requested))
        for package in catalog.with_roots(candidates):
            candidates.extend(root_name_of(name) for name in package.dependency_names)
        candidates = list(dict.fromkeys(candidates))

    known = set(catalog_roots)
    roots = tuple(name for name in candidates if name in known)
    unresolved = tuple(name for name in candidates if name not in known)
    if not roots:
        raise UsageError(f"None of the requested packages were found: {', '.join(requested)}")
    return Resolution(roots=roots, unresolved=unresolved)


__all__ = ["Resolution", "check_not_requesting_subspecs", "resolve"]
