# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helper services for the build and plan CLI commands."""

from __future__ import annotations

import json
from functools import partial
from pathlib import Path
from typing import Any

from rich.table import Table

from ..build import Prebuilder
from ..catalog import load_catalog
from ..config import ConfigError, PrebuildConfig
from ..config_loader import load_config
from ..driver import CommandBuildDriver
from ..models import BuildOutcome, BuildPlan
from ._build_cli_models import BuildCLIOptions
from .shared import CLIError, CLILogger


def load_build_config(root: Path, *, logger: CLILogger) -> PrebuildConfig:
    """Return the effective configuration for ``root``.

    Raises:
        CLIError: If the configuration cannot be loaded.
    """

    try:
        return load_config(root)
    except ConfigError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc


def create_prebuilder(options: BuildCLIOptions, config: PrebuildConfig) -> Prebuilder:
    """Wire a :class:`Prebuilder` reading the catalog and running the build command."""

    catalog_path = options.catalog or config.catalog_path
    return Prebuilder(
        config=config,
        catalog_loader=partial(load_catalog, catalog_path),
        driver=CommandBuildDriver(command=tuple(config.build_command), work_dir=config.work_dir),
        root=options.root,
    )


def render_plan(plan: BuildPlan, *, logger: CLILogger) -> None:
    """Print the groups of ``plan`` as a table."""

    table = Table(title="Prebuild groups")
    table.add_column("#", justify="right")
    table.add_column("Kind")
    table.add_column("Configuration")
    table.add_column("Selected")
    table.add_column("Members")
    table.add_column("Prebuilt")
    for index, group in enumerate(plan.groups, start=1):
        table.add_row(
            str(index),
            group.kind,
            group.build_configuration,
            ", ".join(package.name for package in group.initial_members),
            ", ".join(group.names),
            ", ".join(group.prebuilt_names),
        )
    logger.console.print(table)
    if plan.prebuilt_to_install:
        names = ", ".join(package.name for package in plan.prebuilt_to_install)
        logger.info(f"Already prebuilt: {names}")


def outcome_payload(outcome: BuildOutcome) -> dict[str, Any]:
    """Return a JSON-serialisable summary of ``outcome``."""

    plan = outcome.plan
    return {
        "status": outcome.status,
        "groups": [
            {
                "kind": group.kind,
                "build_configuration": group.build_configuration,
                "members": list(group.names),
            }
            for group in (plan.groups if plan is not None else ())
        ],
        "unresolved": list(plan.unresolved) if plan is not None else [],
        "warnings": [str(warning) for warning in outcome.warnings],
        "licenses": [{"package": record.package, "license": record.license} for record in outcome.licenses],
        "restorable": [package.name for package in outcome.restorable],
        "update_prebuilt": outcome.update_prebuilt,
    }


def write_report(outcome: BuildOutcome, path: Path) -> None:
    """Persist the outcome summary as JSON at ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(outcome_payload(outcome), indent=2), encoding="utf-8")


__all__ = [
    "create_prebuilder",
    "load_build_config",
    "outcome_payload",
    "render_plan",
    "write_report",
]
