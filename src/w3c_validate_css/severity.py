# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity reclassification rules applied to engine diagnostics."""

from __future__ import annotations

import re
from collections.abc import Collection
from typing import Final

from .models import Severity

UNKNOWN_PROPERTY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"Property\s+[“”\"']?([a-z0-9-]+)[“”\"']?\s+doesn[’']?t\s+exist",
    re.IGNORECASE,
)


def unknown_property_name(message: str) -> str | None:
    """Return the lower-cased property named by an "unknown property" message.

    Args:
        message: Cleaned engine message, e.g. ``Property “foo-bar” doesn't exist``.

    Returns:
        str | None: Property name, or ``None`` when the message has another shape.
    """

    match = UNKNOWN_PROPERTY_PATTERN.search(message or "")
    if match is None:
        return None
    return match.group(1).lower()


def classify_error(message: str, tolerate: Collection[str]) -> Severity:
    """Return the effective severity of an engine error.

    Errors about unknown properties listed in ``tolerate`` are downgraded to
    warnings; every other error stays an error.
    """

    name = unknown_property_name(message)
    if name is not None and name in tolerate:
        return Severity.WARNING
    return Severity.ERROR


__all__ = ["UNKNOWN_PROPERTY_PATTERN", "classify_error", "unknown_property_name"]
