# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helpers for inspecting the application manifest (Podfile)."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from pathlib import Path

_WHITESPACE = re.compile(r"\s+")
COMMENT_PREFIX = "#"


def strip_line(line: str) -> str:
    """Return ``line`` with all whitespace removed and quotes normalised."""

    return _WHITESPACE.sub("", line).replace('"', "'")


def read_manifest_lines(path: Path) -> list[str]:
    """Return the lines of the manifest at ``path``, or nothing when it is absent."""

    if not path.is_file():
        return []
    return path.read_text(encoding="utf-8").splitlines()


def missing_lines(manifest_lines: Iterable[str], expected: Sequence[str]) -> list[str]:
    """Return entries of ``expected`` absent from ``manifest_lines``.

    Comparison happens on whitespace-normalised lines and ignores commented-out
    manifest lines.

    Args:
        manifest_lines: Raw manifest content split into lines.
        expected: Lines that must be present verbatim.

    Returns:
        list[str]: Expected lines (as given) that were not found.
    """

    present = {stripped for stripped in map(strip_line, manifest_lines) if not stripped.startswith(COMMENT_PREFIX)}
    return [line for line in expected if strip_line(line) not in present]


__all__ = ["missing_lines", "read_manifest_lines", "strip_line"]
