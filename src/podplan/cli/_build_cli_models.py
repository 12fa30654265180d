# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared data structures for the build and plan CLI commands."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from ..config import BuildOptions

NAMES_ARGUMENT = Annotated[
    list[str] | None,
    typer.Argument(help="Root package names to prebuild, or '*' for every package."),
]
ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Project root holding the Podfile and configuration."),
]
CATALOG_OPTION = Annotated[
    Path | None,
    typer.Option("--catalog", help="Package catalog JSON (defaults to the configured catalog_path)."),
]
ALLOW_WARNINGS_OPTION = Annotated[
    bool,
    typer.Option("--allow-warnings", help="Downgrade recoverable validation failures to warnings."),
]
SKIP_PREBUILD_UPDATE_OPTION = Annotated[
    bool | None,
    typer.Option(
        "--skip-prebuild-update/--update-prebuilt",
        help="Skip regenerating the prebuilt manifest after building.",
        show_default=False,
    ),
]
REPORT_OPTION = Annotated[
    Path | None,
    typer.Option("--report", help="Write a JSON summary of the build outcome to this path."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]


def normalize_cli_values(values: Sequence[str] | None) -> tuple[str, ...]:
    """Return sanitized CLI values preserving order."""

    if not values:
        return ()
    return tuple(stripped for stripped in (entry.strip() for entry in values if entry) if stripped)


@dataclass(slots=True)
class BuildCLIOptions:
    """Capture CLI inputs supplied to the build and plan commands."""

    names: tuple[str, ...]
    root: Path
    catalog: Path | None
    report: Path | None
    build_options: BuildOptions


def build_cli_options(
    names: Sequence[str] | None,
    *,
    root: Path,
    catalog: Path | None,
    allow_warnings: bool,
    skip_prebuild_update: bool | None,
    report: Path | None,
    emoji: bool,
) -> BuildCLIOptions:
    """Construct ``BuildCLIOptions`` from Typer callback parameters."""

    resolved_root = root.resolve()
    return BuildCLIOptions(
        names=normalize_cli_values(names),
        root=resolved_root,
        catalog=None if catalog is None else (catalog if catalog.is_absolute() else resolved_root / catalog),
        report=report,
        build_options=BuildOptions(
            allow_warnings=allow_warnings,
            skip_prebuild_update=skip_prebuild_update,
            use_emoji=emoji,
        ),
    )


__all__ = [
    "ALLOW_WARNINGS_OPTION",
    "BuildCLIOptions",
    "CATALOG_OPTION",
    "EMOJI_OPTION",
    "NAMES_ARGUMENT",
    "REPORT_OPTION",
    "ROOT_OPTION",
    "SKIP_PREBUILD_UPDATE_OPTION",
    "build_cli_options",
    "normalize_cli_values",
]
