# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run the validator engine against one CSS file."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .constants import (
    ENGINE_LANGUAGE,
    ENGINE_MEDIUM,
    ENGINE_OUTPUT_FORMAT,
    JAVA_EXECUTABLE,
    JVM_PROXY_FLAGS,
    PROXY_ENV_VARS,
    SPAWN_FAILURE_RETURNCODE,
)
from .models import ValidationConfig
from .process import CommandOptions, run_command

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessOutput:
    """Raw streams and exit status captured from one engine invocation."""

    stdout: str = ""
    stderr: str = ""
    returncode: int = 0


def file_uri(file: Path) -> str:
    """Return ``file`` as an absolute ``file://`` URI."""

    return Path(os.path.abspath(file)).as_uri()


def build_arguments(file: Path, config: ValidationConfig, engine: Path) -> list[str]:
    """Return the JVM and engine arguments used to validate ``file``.

    The result depends only on the inputs, so repeated runs produce
    byte-identical command lines.

    Args:
        file: CSS file to validate.
        config: Run configuration supplying warning level and profile.
        engine: Path to the engine archive.

    Returns:
        list[str]: Arguments following the ``java`` executable.
    """

    return [
        *JVM_PROXY_FLAGS,
        "-jar",
        str(engine),
        "-output",
        ENGINE_OUTPUT_FORMAT,
        "-warning",
        str(config.warning_level),
        "-profile",
        config.profile.value,
        "-lang",
        ENGINE_LANGUAGE,
        "-usermedium",
        ENGINE_MEDIUM,
        file_uri(file),
    ]


def build_environment(base: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return ``base`` (default: ``os.environ``) with every proxy variable blanked."""

    env = dict(os.environ if base is None else base)
    for name in PROXY_ENV_VARS:
        env[name] = ""
    return env


class InvocationRunner:
    """Spawn the engine once per file and capture what it printed."""

    def __init__(
        self,
        engine: Path,
        *,
        java: str = JAVA_EXECUTABLE,
        timeout: float | None = None,
        base_env: Mapping[str, str] | None = None,
    ) -> None:
        self._engine = engine
        self._java = java
        self._timeout = timeout
        self._base_env = base_env

    def command(self, file: Path, config: ValidationConfig) -> list[str]:
        """Return the full command line for ``file``."""
        return [self._java, *build_arguments(file, config, self._engine)]

    def run(self, file: Path, config: ValidationConfig) -> ProcessOutput:
        """Invoke the engine for ``file``.

        Never raises for a failed spawn or a non-zero exit: a spawn failure
        yields empty streams with exit status ``1`` and a timeout yields exit
        status ``124``.
        """

        options = CommandOptions(env=build_environment(self._base_env), timeout=self._timeout)
        try:
            completed = run_command(self.command(file, config), options=options)
        except OSError as exc:
            LOGGER.debug("failed to spawn engine for %s: %s", file, exc)
            return ProcessOutput(returncode=SPAWN_FAILURE_RETURNCODE)
        return ProcessOutput(
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            returncode=completed.returncode,
        )


__all__ = [
    "InvocationRunner",
    "ProcessOutput",
    "build_arguments",
    "build_environment",
    "file_uri",
]
