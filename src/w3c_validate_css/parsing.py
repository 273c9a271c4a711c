# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Turn raw engine output into ordered error and warning diagnostics.

The engine is inconsistent about where it prints its JSON report and about the
key names it uses, so extraction is best effort:

* the first ``{`` to the last ``}`` of a stream is decoded, ignoring log noise
  around it;
* stdout is tried first, then stderr, then both streams concatenated;
* each logical field is looked up through a short ordered list of candidate
  keys (see :data:`ROOT_KEYS` and friends).
"""

from __future__ import annotations

import json
import math
import os
import re
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, TypeAlias, cast
from urllib.parse import unquote, urlsplit
from urllib.request import url2pathname

from .errors import NoStructuredOutputError
from .invocation import ProcessOutput
from .models import Diagnostic, Severity, ValidationConfig
from .severity import classify_error

JsonObject: TypeAlias = Mapping[str, object]

ROOT_KEYS: Final[tuple[str, ...]] = ("cssvalidation", "cssValidation", "validation")
ERROR_LIST_KEYS: Final[tuple[str, ...]] = ("errors", "error")
WARNING_LIST_KEYS: Final[tuple[str, ...]] = ("warnings", "warning")
ERROR_MESSAGE_KEYS: Final[tuple[str, ...]] = ("message", "error", "msg")
WARNING_MESSAGE_KEYS: Final[tuple[str, ...]] = ("message", "warning", "msg")
LINE_KEYS: Final[tuple[str, ...]] = ("line",)
COLUMN_KEYS: Final[tuple[str, ...]] = ("col", "column")
SOURCE_KEYS: Final[tuple[str, ...]] = ("source", "uri")
CATEGORY_KEYS: Final[tuple[str, ...]] = ("type", "category")

DEPRECATED_CATEGORY: Final[str] = "deprecated"
FILE_SCHEME: Final[str] = "file:"

_LEADING_INT: Final[re.Pattern[str]] = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True, slots=True)
class NormalizedIssues:
    """Errors and warnings attributed to one file, in engine emission order."""

    errors: tuple[Diagnostic, ...] = field(default_factory=tuple)
    warnings: tuple[Diagnostic, ...] = field(default_factory=tuple)


def extract_json_object(text: str | None) -> JsonObject | None:
    """Decode the span between the first ``{`` and the last ``}`` of ``text``.

    Returns:
        JsonObject | None: Decoded object, or ``None`` when no braces were found,
        the span is not valid JSON, or it does not decode to an object.
    """

    if not text:
        return None
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last <= first:
        return None
    try:
        payload = json.loads(text[first : last + 1])
    except json.JSONDecodeError:
        return None
    return cast(JsonObject, payload) if isinstance(payload, Mapping) else None


def extract_structured_payload(output: ProcessOutput) -> JsonObject:
    """Return the engine's JSON report from whichever stream carries it.

    Raises:
        NoStructuredOutputError: When stdout, stderr and their concatenation all
            fail to yield a JSON object.
    """

    for candidate in (output.stdout, output.stderr, (output.stdout or "") + (output.stderr or "")):
        payload = extract_json_object(candidate)
        if payload is not None:
            return payload
    raise NoStructuredOutputError("validator did not produce JSON output")


def first_value(item: JsonObject, keys: Sequence[str]) -> object | None:
    """Return the first truthy value stored under one of ``keys``."""

    for key in keys:
        value = item.get(key)
        if value:
            return value
    return None


def _root(payload: JsonObject) -> JsonObject:
    for key in ROOT_KEYS:
        value = payload.get(key)
        if isinstance(value, Mapping):
            return cast(JsonObject, value)
    return payload


def _entries(root: JsonObject, keys: Sequence[str]) -> list[object]:
    value = first_value(root, keys)
    if isinstance(value, list):
        return value
    return []


def iter_items(root: JsonObject, keys: Sequence[str]) -> Iterator[JsonObject]:
    """Yield the object entries of the first list found under ``keys``."""

    for entry in _entries(root, keys):
        if isinstance(entry, Mapping):
            yield cast(JsonObject, entry)


def coerce_int(value: object) -> int:
    """Parse ``value`` as a non-negative integer, falling back to ``0``."""

    number = 0
    if isinstance(value, bool):
        number = 0
    elif isinstance(value, int):
        number = value
    elif isinstance(value, float) and math.isfinite(value):
        number = math.trunc(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        number = int(match.group(1)) if match else 0
    return max(number, 0)


def clean_message(value: object) -> str:
    """Trim ``value`` and drop a single trailing colon."""

    message = str(value or "").strip()
    if message.endswith(":"):
        message = message[:-1].strip()
    return message


def normalize_source_path(raw: str) -> Path:
    """Convert an engine-reported source (path or ``file:`` URI) to an absolute path.

    Both ``file:///abs/path`` and ``file://localhost/abs/path`` are decoded as
    file URLs; other values are percent-decoded and made absolute against the
    working directory. Symlinks are not resolved.
    """

    text = str(raw or "")
    if text[: len(FILE_SCHEME)].lower() == FILE_SCHEME:
        text = text[len(FILE_SCHEME) :]
    if text.startswith("//"):
        parts = urlsplit(FILE_SCHEME + text)
        if parts.netloc in ("", "localhost"):
            return Path(os.path.abspath(url2pathname(parts.path)))
    return Path(os.path.abspath(unquote(text)))


def _source_matches(item: JsonObject, file_abs: Path) -> bool:
    source = first_value(item, SOURCE_KEYS)
    if source is None:
        return True
    return normalize_source_path(str(source)) == file_abs


def _diagnostic(item: JsonObject, message_keys: Sequence[str], severity: Severity) -> Diagnostic:
    return Diagnostic(
        line=coerce_int(first_value(item, LINE_KEYS)),
        column=coerce_int(first_value(item, COLUMN_KEYS)),
        message=clean_message(first_value(item, message_keys)),
        severity=severity,
    )


def _is_deprecation(item: JsonObject) -> bool:
    return str(first_value(item, CATEGORY_KEYS) or "").lower() == DEPRECATED_CATEGORY


def parse_issues(
    payload: JsonObject,
    file: Path,
    include_warnings: bool,
    include_deprecations: bool,
    config: ValidationConfig,
) -> NormalizedIssues:
    """Classify the diagnostics of a decoded engine report for ``file``.

    Args:
        payload: Decoded JSON report.
        file: File the engine was asked to validate.
        include_warnings: When ``False`` no warnings are returned, including
            downgraded errors.
        include_deprecations: Keep warnings the engine tags as deprecations.
        config: Run configuration supplying the tolerate list.

    Returns:
        NormalizedIssues: Errors and warnings that belong to ``file``.
    """

    file_abs = Path(os.path.abspath(file))
    root = _root(payload)
    errors: list[Diagnostic] = []
    warnings: list[Diagnostic] = []

    for item in iter_items(root, ERROR_LIST_KEYS):
        if not _source_matches(item, file_abs):
            continue
        message = clean_message(first_value(item, ERROR_MESSAGE_KEYS))
        if classify_error(message, config.tolerate) is Severity.WARNING:
            if include_warnings:
                warnings.append(_diagnostic(item, ERROR_MESSAGE_KEYS, Severity.WARNING))
            continue
        errors.append(_diagnostic(item, ERROR_MESSAGE_KEYS, Severity.ERROR))

    if include_warnings:
        for item in iter_items(root, WARNING_LIST_KEYS):
            if not include_deprecations and _is_deprecation(item):
                continue
            if _source_matches(item, file_abs):
                warnings.append(_diagnostic(item, WARNING_MESSAGE_KEYS, Severity.WARNING))

    return NormalizedIssues(errors=tuple(errors), warnings=tuple(warnings))


def normalize(
    output: ProcessOutput,
    file: Path,
    include_warnings: bool,
    include_deprecations: bool,
    config: ValidationConfig,
) -> NormalizedIssues:
    """Extract and classify the diagnostics the engine produced for ``file``.

    Raises:
        NoStructuredOutputError: When the engine output holds no JSON object.
    """

    payload = extract_structured_payload(output)
    return parse_issues(payload, file, include_warnings, include_deprecations, config)


__all__ = [
    "NormalizedIssues",
    "clean_message",
    "coerce_int",
    "extract_json_object",
    "extract_structured_payload",
    "first_value",
    "iter_items",
    "normalize",
    "normalize_source_path",
    "parse_issues",
]
