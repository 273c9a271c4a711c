# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console and machine-readable reports for validation runs."""

from __future__ import annotations

import json
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from rich.console import Console
from rich.text import Text

from .console import get_console_manager
from .models import Diagnostic, FileResult, RunSummary, ValidationConfig

PASS_MARK: Final[str] = "✔"
FAIL_MARK: Final[str] = "✖"
ERROR_STYLE: Final[str] = "red"
WARNING_STYLE: Final[str] = "#FFA500"
PASS_STYLE: Final[str] = "green"
LOCATION_STYLE: Final[str] = "dim"
INDENT: Final[str] = "  "
DETAIL_INDENT: Final[str] = "      "


def format_location(file: Path, diagnostic: Diagnostic, *, cwd: Path | None = None) -> str:
    """Return ``<path>:<line>[:<col>]`` with the path relative to ``cwd``.

    The column is omitted when the engine did not report one.
    """

    base = cwd or Path.cwd()
    try:
        shown = os.path.relpath(file, base)
    except ValueError:
        shown = str(file)
    where = f"{shown or file}:{diagnostic.line}"
    if diagnostic.column:
        where += f":{diagnostic.column}"
    return where


def header_path(file: Path, target: Path) -> str:
    """Return ``file`` relative to the validation target, or its name for single-file runs."""

    if file == target:
        return file.name
    try:
        relative = os.path.relpath(file, target)
    except ValueError:
        return file.name
    return file.name if relative in ("", ".") else relative


def render_json(summary: RunSummary) -> str:
    """Serialise ``summary`` as ``{passed, failed, results}`` JSON."""

    return json.dumps(summary.to_payload())


def exit_code(summary: RunSummary) -> int:
    """Return the process exit status for ``summary``: ``0`` when nothing failed."""

    return 0 if summary.failed == 0 else 1


class ConsoleReporter:
    """Print a line-oriented report as each file completes."""

    def __init__(
        self,
        config: ValidationConfig,
        *,
        use_color: bool = True,
        use_emoji: bool = True,
        console: Console | None = None,
        err_console: Console | None = None,
        cwd: Path | None = None,
    ) -> None:
        manager = get_console_manager()
        self._config = config
        self._use_color = use_color
        self._console = console or manager.get(color=use_color, emoji=use_emoji)
        self._err_console = err_console or manager.get(color=use_color, emoji=use_emoji, stderr=True)
        self._cwd = cwd
        self._target: Path | None = None

    def _styled(self, text: str, style: str) -> Text:
        return Text(text, style=style) if self._use_color else Text(text)

    def start(self, target: Path, files: Sequence[Path]) -> None:
        """Print the run banner."""

        self._target = target
        self._console.print()
        self._console.print(self._styled(f"w3c validating {len(files)} CSS files in {target}", "bold cyan"))
        self._console.print()

    def file_done(self, result: FileResult) -> None:
        """Print the pass/fail line for ``result`` followed by its diagnostics."""

        shown = header_path(result.file, self._target or result.file.parent)
        if result.ok:
            self._console.print(self._styled(f"{INDENT}{PASS_MARK} {shown}", PASS_STYLE))
            return

        self._console.print(self._styled(f"{INDENT}{FAIL_MARK} {shown}", ERROR_STYLE))
        for diagnostic in result.errors:
            self._print_diagnostic(result.file, diagnostic, ERROR_STYLE)
        if not self._config.errors_only and self._config.warning_level > 0:
            for diagnostic in result.warnings:
                self._print_diagnostic(result.file, diagnostic, WARNING_STYLE)

    def finish(self, summary: RunSummary) -> None:
        """Print the trailing blank line closing the report."""

        del summary
        self._console.print()

    def _print_diagnostic(self, file: Path, diagnostic: Diagnostic, style: str) -> None:
        line = Text(DETAIL_INDENT)
        line.append_text(self._styled(format_location(file, diagnostic, cwd=self._cwd), LOCATION_STYLE))
        line.append_text(self._styled(f" - {diagnostic.message}", style))
        self._err_console.print(line)


__all__ = [
    "ConsoleReporter",
    "exit_code",
    "format_location",
    "header_path",
    "render_json",
]
