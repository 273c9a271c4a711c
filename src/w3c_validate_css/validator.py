# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Validate a file or directory of CSS and fold the outcomes into a summary."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol

from .constants import JAVA_EXECUTABLE
from .discovery import expand_files
from .errors import NoStructuredOutputError
from .invocation import InvocationRunner, ProcessOutput
from .models import Diagnostic, FileResult, RunSummary, Severity, ValidationConfig
from .parsing import normalize
from .provisioning import Provisioner, default_provisioner, ensure_java

LOGGER = logging.getLogger(__name__)


class Runner(Protocol):
    """Engine invocation seam used by :class:`Validator`."""

    def run(self, file: Path, config: ValidationConfig) -> ProcessOutput:
        """Invoke the engine for ``file``."""
        raise NotImplementedError


class RunObserver(Protocol):
    """Receives progress notifications while a run is in flight."""

    def start(self, target: Path, files: Sequence[Path]) -> None:
        """Called once the input files are known, before the first invocation."""

    def file_done(self, result: FileResult) -> None:
        """Called after each file, in input order."""


RunnerFactory = Callable[[Path], Runner]
HostCheck = Callable[[], None]


def _default_host_check() -> None:
    ensure_java(JAVA_EXECUTABLE)


class Validator:
    """Drive host check, provisioning, invocation and normalisation for a run.

    Files are processed one after another in input order; the engine archive is
    resolved once before the first file and reused for the rest of the run.
    """

    def __init__(
        self,
        *,
        provisioner: Provisioner | None = None,
        runner_factory: RunnerFactory | None = None,
        host_check: HostCheck | None = None,
        observer: RunObserver | None = None,
    ) -> None:
        self._provisioner = provisioner or default_provisioner()
        self._runner_factory: RunnerFactory = runner_factory or InvocationRunner
        self._host_check = host_check or _default_host_check
        self._observer = observer

    def validate(self, target: str | os.PathLike[str], config: ValidationConfig) -> RunSummary:
        """Validate ``target`` and return the run summary.

        Args:
            target: CSS file or directory to validate.
            config: Options applied to every file of the run.

        Returns:
            RunSummary: One :class:`FileResult` per input file, in input order.

        Raises:
            HostUnavailableError: If the Java runtime is missing.
            ProvisioningError: If the engine archive cannot be obtained.
            InputNotFoundError: If ``target`` does not exist.
            InputNotCssError: If ``target`` is a non-CSS file.
        """

        self._host_check()
        engine = self._provisioner.resolve()
        files = expand_files(target)
        runner = self._runner_factory(engine)

        if self._observer is not None:
            self._observer.start(Path(os.path.abspath(target)), files)

        results: list[FileResult] = []
        for file in files:
            result = self.validate_file(runner, file, config)
            if self._observer is not None:
                self._observer.file_done(result)
            results.append(result)
        return RunSummary(results=tuple(results))

    @staticmethod
    def validate_file(runner: Runner, file: Path, config: ValidationConfig) -> FileResult:
        """Run and normalise a single file.

        Output without a JSON report becomes a failed result carrying the
        extraction error, so one broken invocation does not abort the batch.
        """

        output = runner.run(file, config)
        try:
            issues = normalize(
                output,
                file,
                config.include_warnings,
                config.include_deprecations,
                config,
            )
        except NoStructuredOutputError as exc:
            LOGGER.debug("%s: %s (exit status %s)", file, exc, output.returncode)
            failure = Diagnostic(message=str(exc), severity=Severity.ERROR)
            return FileResult(file=file, ok=False, errors=(failure,), warnings=())
        return FileResult.build(file, issues.errors, issues.warnings, config)


def validate(
    target: str | os.PathLike[str],
    config: ValidationConfig | None = None,
    *,
    validator: Validator | None = None,
) -> RunSummary:
    """Validate ``target`` with the process-wide engine provisioner.

    Args:
        target: CSS file or directory to validate.
        config: Run options; defaults to :class:`ValidationConfig` defaults.
        validator: Optional preconfigured :class:`Validator`.

    Returns:
        RunSummary: Counts and per-file results in input order.
    """

    return (validator or Validator()).validate(target, config or ValidationConfig())


__all__ = ["HostCheck", "RunObserver", "Runner", "RunnerFactory", "Validator", "validate"]
