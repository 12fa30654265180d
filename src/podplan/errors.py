# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exceptions and warnings raised while planning and dispatching prebuilds."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final, Literal

CheckName = Literal[
    "subspec-argument",
    "existence",
    "split-subspec-link-safety",
    "development-pods",
    "build-configuration-alignment",
    "post-install-actions",
]

CHECK_SUBSPEC_ARGUMENT: Final[CheckName] = "subspec-argument"
CHECK_EXISTENCE: Final[CheckName] = "existence"
CHECK_SPLIT_SUBSPEC_LINK_SAFETY: Final[CheckName] = "split-subspec-link-safety"
CHECK_DEVELOPMENT_PODS: Final[CheckName] = "development-pods"
CHECK_BUILD_CONFIGURATION_ALIGNMENT: Final[CheckName] = "build-configuration-alignment"
CHECK_POST_INSTALL_ACTIONS: Final[CheckName] = "post-install-actions"


class PrebuildError(RuntimeError):
    """Base class for failures that abort a prebuild run."""


class CatalogError(PrebuildError):
    """Raised when a package catalog document is malformed."""


class UsageError(PrebuildError):
    """Raised when the prebuild request itself is malformed."""

    def __init__(self, message: str, *, check: CheckName | None = None) -> None:
        """Create the error with an optional check identifier.

        Args:
            message: Human-readable description of the malformed request.
            check: Validation check that rejected the request, when any.
        """

        super().__init__(message)
        self.check = check


ArgumentError = UsageError


class ValidationError(PrebuildError):
    """Raised when a consistency check fails before any group is dispatched."""

    def __init__(self, check: CheckName, message: str, packages: Sequence[str] = ()) -> None:
        """Create the error describing the violated rule.

        Args:
            check: Identifier of the failing consistency check.
            message: Actionable description of the violation.
            packages: Names of the offending packages.
        """

        super().__init__(f"[{check}] {message}")
        self.check: CheckName = check
        self.detail = message
        self.packages: tuple[str, ...] = tuple(dict.fromkeys(packages))


class ExternalBuildError(PrebuildError):
    """Raised when the external build step reports a failure for a group."""

    def __init__(self, message: str, *, group_kind: str | None = None, members: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.group_kind = group_kind
        self.members: tuple[str, ...] = tuple(members)


class ValidationWarning(UserWarning):
    """Downgraded consistency failure reported when warnings are allowed."""

    def __init__(self, check: CheckName, message: str, packages: Sequence[str] = ()) -> None:
        super().__init__(f"[{check}] {message}")
        self.check: CheckName = check
        self.detail = message
        self.packages: tuple[str, ...] = tuple(dict.fromkeys(packages))


class UnresolvedNameWarning(UserWarning):
    """Requested package name that is absent from the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"'{name}' not found, skipping")
        self.name = name


__all__ = [
    "ArgumentError",
    "CHECK_BUILD_CONFIGURATION_ALIGNMENT",
    "CHECK_DEVELOPMENT_PODS",
    "CHECK_EXISTENCE",
    "CHECK_POST_INSTALL_ACTIONS",
    "CHECK_SPLIT_SUBSPEC_LINK_SAFETY",
    "CHECK_SUBSPEC_ARGUMENT",
    "CatalogError",
    "CheckName",
    "ExternalBuildError",
    "PrebuildError",
    "UnresolvedNameWarning",
    "UsageError",
    "ValidationError",
    "ValidationWarning",
]
