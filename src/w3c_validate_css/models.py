# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the w3c_validate_css package."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from enum import Enum
from pathlib import Path
from typing import Final, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

DiagnosticPayload: TypeAlias = dict[str, int | str]

_LIST_SEPARATOR: Final[re.Pattern[str]] = re.compile(r"[,\s]+")


class Profile(str, Enum):
    """CSS profiles understood by the validation engine."""

    CSS3 = "css3"
    CSS21 = "css21"
    CSS1 = "css1"
    SVG = "svg"


class Severity(str, Enum):
    """Classification assigned to each diagnostic after normalisation."""

    ERROR = "error"
    WARNING = "warning"


def parse_name_list(value: str | Iterable[str] | None) -> frozenset[str]:
    """Return lower-cased names parsed from a comma/whitespace separated value.

    Args:
        value: Raw list supplied on the command line or in configuration.
            Strings are split on commas and whitespace; other iterables are
            taken item by item.

    Returns:
        frozenset[str]: Lower-cased, non-empty names.
    """

    if value is None:
        return frozenset()
    items = _LIST_SEPARATOR.split(value) if isinstance(value, str) else [str(item) for item in value]
    return frozenset(item.strip().lower() for item in items if item and item.strip())


class ValidationConfig(BaseModel):
    """Immutable options applied to one validation run."""

    model_config = ConfigDict(frozen=True)

    profile: Profile = Profile.CSS3
    warning_level: Literal[0, 1, 2] = 2
    include_deprecations: bool = False
    errors_only: bool = False
    tolerate: frozenset[str] = Field(default_factory=frozenset)
    output_json: bool = False

    @field_validator("tolerate", mode="before")
    @classmethod
    def _normalize_tolerate(cls, value: object) -> frozenset[str]:
        """Accept tolerate lists as strings or iterables and lower-case them."""
        if value is None or isinstance(value, str):
            return parse_name_list(value)
        if isinstance(value, Iterable):
            return parse_name_list(str(item) for item in value)
        raise TypeError("tolerate must be a string or an iterable of strings")

    @property
    def include_warnings(self) -> bool:
        """Return ``True`` when warnings count towards results and pass/fail."""
        return not self.errors_only and self.warning_level > 0


class Diagnostic(BaseModel):
    """A single issue reported by the engine for one file."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(default=0, ge=0)
    column: int = Field(default=0, ge=0)
    message: str
    severity: Severity

    def to_payload(self) -> DiagnosticPayload:
        """Return the ``{line, col, msg}`` mapping used in machine-readable reports."""
        return {"line": self.line, "col": self.column, "msg": self.message}


class FileResult(BaseModel):
    """Outcome of validating one CSS file."""

    model_config = ConfigDict(frozen=True)

    file: Path
    ok: bool
    errors: tuple[Diagnostic, ...] = ()
    warnings: tuple[Diagnostic, ...] = ()

    @classmethod
    def build(
        cls,
        file: Path,
        errors: Sequence[Diagnostic],
        warnings: Sequence[Diagnostic],
        config: ValidationConfig,
    ) -> FileResult:
        """Create a result whose pass flag follows the configured warning policy.

        Args:
            file: Absolute path of the validated file.
            errors: Error diagnostics in engine emission order.
            warnings: Warning diagnostics in engine emission order.
            config: Run configuration deciding whether warnings fail a file.

        Returns:
            FileResult: Immutable result for ``file``.
        """

        ok = not errors and (not config.include_warnings or not warnings)
        return cls(file=file, ok=ok, errors=tuple(errors), warnings=tuple(warnings))

    def to_payload(self) -> dict[str, object]:
        """Return the JSON-compatible representation of this result."""
        return {
            "file": str(self.file),
            "ok": self.ok,
            "errors": [diag.to_payload() for diag in self.errors],
            "warnings": [diag.to_payload() for diag in self.warnings],
        }


class RunSummary(BaseModel):
    """Aggregate of every :class:`FileResult` produced by a run, in input order."""

    model_config = ConfigDict(frozen=True)

    results: tuple[FileResult, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def passed(self) -> int:
        """Number of files that passed."""
        return sum(1 for result in self.results if result.ok)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failed(self) -> int:
        """Number of files that failed."""
        return len(self.results) - self.passed

    def to_payload(self) -> dict[str, object]:
        """Return the ``{passed, failed, results}`` report structure."""
        return {
            "passed": self.passed,
            "failed": self.failed,
            "results": [result.to_payload() for result in self.results],
        }


__all__ = [
    "Diagnostic",
    "DiagnosticPayload",
    "FileResult",
    "Profile",
    "RunSummary",
    "Severity",
    "ValidationConfig",
    "parse_name_list",
]
