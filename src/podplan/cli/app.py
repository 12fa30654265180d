# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the build and plan commands."""

from __future__ import annotations

from pathlib import Path

import typer

from ..constants import EMPTY_REQUEST_STATUS
from ..errors import PrebuildError
from ._build_cli_models import (
    ALLOW_WARNINGS_OPTION,
    CATALOG_OPTION,
    EMOJI_OPTION,
    NAMES_ARGUMENT,
    REPORT_OPTION,
    ROOT_OPTION,
    SKIP_PREBUILD_UPDATE_OPTION,
    build_cli_options,
)
from ._build_cli_services import create_prebuilder, load_build_config, render_plan, write_report
from .shared import CLIError, build_cli_logger

app = typer.Typer(
    name="podplan",
    help="Selective pod prebuild planner.",
    no_args_is_help=True,
    add_completion=False,
)


@app.command("build", help="Prebuild the requested packages and everything they depend on.")
def build_command(
    names: NAMES_ARGUMENT = None,
    root: ROOT_OPTION = Path("."),
    catalog: CATALOG_OPTION = None,
    allow_warnings: ALLOW_WARNINGS_OPTION = False,
    skip_prebuild_update: SKIP_PREBUILD_UPDATE_OPTION = None,
    report: REPORT_OPTION = None,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Execute the build command."""

    options = build_cli_options(
        names,
        root=root,
        catalog=catalog,
        allow_warnings=allow_warnings,
        skip_prebuild_update=skip_prebuild_update,
        report=report,
        emoji=emoji,
    )
    logger = build_cli_logger(emoji=options.build_options.use_emoji)
    if not options.names:
        logger.warn("No package names given; nothing to build.")
        raise typer.Exit(code=EMPTY_REQUEST_STATUS)
    try:
        config = load_build_config(options.root, logger=logger)
        prebuilder = create_prebuilder(options, config)
        outcome = prebuilder.build(options.names, options.build_options)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    except PrebuildError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc

    if options.report is not None:
        write_report(outcome, options.report)
    raise typer.Exit(code=outcome.status)


@app.command("plan", help="Show the build groups that would be dispatched, without building.")
def plan_command(
    names: NAMES_ARGUMENT = None,
    root: ROOT_OPTION = Path("."),
    catalog: CATALOG_OPTION = None,
    allow_warnings: ALLOW_WARNINGS_OPTION = False,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Execute the plan command."""

    options = build_cli_options(
        names,
        root=root,
        catalog=catalog,
        allow_warnings=allow_warnings,
        skip_prebuild_update=None,
        report=None,
        emoji=emoji,
    )
    logger = build_cli_logger(emoji=options.build_options.use_emoji)
    if not options.names:
        logger.warn("No package names given; nothing to plan.")
        raise typer.Exit(code=EMPTY_REQUEST_STATUS)
    try:
        config = load_build_config(options.root, logger=logger)
        plan = create_prebuilder(options, config).plan(options.names, options.build_options)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc
    except PrebuildError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc

    render_plan(plan, logger=logger)
    raise typer.Exit(code=0)


__all__ = ["app"]
