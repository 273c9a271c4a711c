# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shell-free wrapper around ``subprocess`` used to drive the Java engine."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; arguments are always passed as a
# list and ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess

from .constants import TIMEOUT_RETURNCODE


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Environment and time limit applied by :func:`run_command`."""

    env: Mapping[str, str] | None = None
    timeout: float | None = None


def _ensure_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return value.decode(errors="replace")


def _resolve_executable(args: Sequence[str]) -> list[str]:
    if not args:
        raise ValueError("subprocess command requires at least one argument")

    head, *rest = args
    if Path(head).is_absolute():
        return [head, *rest]

    resolved = shutil.which(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_command(args: Sequence[str], *, options: CommandOptions | None = None) -> CompletedProcess[str]:
    """Run ``args`` with stdin closed and both output streams captured as text.

    A non-zero exit is returned, never raised. A timeout is folded into a
    completed process with exit status ``124`` and a note appended to stderr.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    command = _resolve_executable(args)
    resolved = options or CommandOptions()

    try:
        return subprocess.run(  # nosec B603 - argument list, no shell
            command,
            env=dict(resolved.env) if resolved.env is not None else None,
            check=False,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=resolved.timeout,
            stdin=subprocess.DEVNULL,
        )
    except subprocess.TimeoutExpired as exc:
        stderr = _ensure_text(exc.stderr)
        timeout_msg = f"Command timed out after {resolved.timeout:.1f}s"
        return subprocess.CompletedProcess(
            args=command,
            returncode=TIMEOUT_RETURNCODE,
            stdout=_ensure_text(exc.stdout),
            stderr=f"{stderr}\n{timeout_msg}" if stderr else timeout_msg,
        )


__all__ = ["CommandOptions", "run_command"]
