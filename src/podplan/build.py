# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Plan and run a selective prebuild from requested package names."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .closure import close, select_packages
from .config import BuildOptions, PrebuildConfig
from .console import detect_tty
from .constants import EMPTY_REQUEST_STATUS, SUCCESS_STATUS
from .driver import BuildDriver, dispatch_groups
from .logging import info, ok, section, warn
from .manifest import read_manifest_lines
from .models import BuildOutcome, BuildPlan, Package, PackageCatalog
from .partition import partition
from .resolution import check_not_requesting_subspecs, resolve
from .validation import check_catalog_not_empty, validate_selection

CatalogLoader = Callable[[], PackageCatalog]


@dataclass(slots=True)
class Prebuilder:
    """Resolve, partition, validate and dispatch prebuild groups.

    The catalog is loaded lazily so malformed requests fail before any
    manifest analysis happens.
    """

    config: PrebuildConfig
    catalog_loader: CatalogLoader
    driver: BuildDriver
    root: Path
    last_outcome: BuildOutcome | None = field(default=None, init=False, repr=False)

    def plan(self, requested: Sequence[str], options: BuildOptions | None = None) -> BuildPlan:
        """Return a validated build plan for ``requested``.

        Args:
            requested: Root package names, or ``*`` for every package.
            options: Request-scoped switches; defaults when omitted.

        Returns:
            BuildPlan: Groups ready to dispatch plus collected warnings.

        Raises:
            UsageError: If the request names a subspec or resolves to nothing.
            ValidationError: If a consistency check fails.
        """

        options = options or BuildOptions()
        requested = tuple(requested)
        check_not_requesting_subspecs(requested)

        info("Loading package catalog", use_emoji=options.use_emoji)
        catalog = self.catalog_loader()
        check_catalog_not_empty(catalog)
        resolution = resolve(requested, catalog)
        for warning in resolution.warnings:
            warn(str(warning), use_emoji=options.use_emoji)

        selected = select_packages(resolution.roots, catalog.buildable())
        groups = partition(selected, self.config.subspecs_to_split, catalog)
        validation_warnings = validate_selection(
            catalog,
            resolution.roots,
            selected,
            config=self.config,
            options=options,
            manifest_lines=read_manifest_lines(self.config.manifest_path),
        )
        for warning in validation_warnings:
            warn(str(warning), use_emoji=options.use_emoji)

        wanted_roots = set(resolution.roots)
        return BuildPlan(
            requested=requested,
            resolved_roots=resolution.roots,
            unresolved=resolution.unresolved,
            selected=selected,
            prebuilt_to_install=tuple(package for package in catalog.prebuilt() if package.root_name in wanted_roots),
            groups=groups,
            warnings=[*resolution.warnings, *validation_warnings],
            catalog=catalog,
        )

    def build(self, requested: Sequence[str], options: BuildOptions | None = None) -> BuildOutcome:
        """Plan ``requested`` and dispatch every group to the build driver.

        Returns:
            BuildOutcome: ``EMPTY_REQUEST_STATUS`` outcome for an empty request,
            otherwise the successful outcome with bookkeeping lists.

        Raises:
            UsageError: If the request is malformed.
            ValidationError: If a consistency check fails; nothing is built.
            ExternalBuildError: If a group fails; later groups are skipped.
        """

        options = options or BuildOptions()
        if not requested:
            outcome = BuildOutcome(status=EMPTY_REQUEST_STATUS)
            self.last_outcome = outcome
            return outcome

        plan = self.plan(requested, options)
        section("Prebuilding", use_color=detect_tty())
        for group in plan.groups:
            info(
                f"Building {group.kind} group ({group.build_configuration}): {', '.join(group.names)}",
                use_emoji=options.use_emoji,
            )
        report = dispatch_groups(plan.groups, self.driver, root=self.root, lockfile_name=self.config.lockfile_name)

        outcome = BuildOutcome(
            status=SUCCESS_STATUS,
            plan=plan,
            licenses=report.licenses,
            restorable=restorable_packages(plan),
            update_prebuilt=not options.effective_skip_prebuild_update(self.config),
        )
        self.last_outcome = outcome
        ok("done!", use_emoji=options.use_emoji)
        return outcome

    def run(self, requested: Sequence[str], options: BuildOptions | None = None) -> int:
        """Build ``requested`` and return the integer exit status."""

        return self.build(requested, options).status


def restorable_packages(plan: BuildPlan) -> tuple[Package, ...]:
    """Return built packages with their dependencies plus prebuilt packages to install.

    Args:
        plan: Plan whose groups were dispatched.

    Returns:
        tuple[Package, ...]: Packages the restore manifest must pin, without duplicates.
    """

    if plan.catalog is None:
        return plan.prebuilt_to_install
    built = tuple(package for package in close(plan.built, plan.catalog) if not package.is_prebuilt)
    merged = {package.name: package for package in (*built, *plan.prebuilt_to_install)}
    return tuple(merged.values())


__all__ = ["CatalogLoader", "Prebuilder", "restorable_packages"]
