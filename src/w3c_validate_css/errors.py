# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy raised by the CSS validation pipeline."""

from __future__ import annotations


class ValidateCssError(Exception):
    """Base class for every error raised by :mod:`w3c_validate_css`."""


class HostUnavailableError(ValidateCssError):
    """Raised when the Java runtime required by the engine cannot be found."""


class ProvisioningError(ValidateCssError):
    """Raised when no configured source produced a valid engine archive."""


class InputNotFoundError(ValidateCssError):
    """Raised when the validation target does not exist."""


class InputNotCssError(ValidateCssError):
    """Raised when a single-file target does not carry a ``.css`` extension."""


class NoStructuredOutputError(ValidateCssError):
    """Raised when the engine emitted no decodable JSON object on any channel."""


class ConfigError(ValidateCssError):
    """Raised when configuration input is invalid."""


__all__ = [
    "ConfigError",
    "HostUnavailableError",
    "InputNotCssError",
    "InputNotFoundError",
    "NoStructuredOutputError",
    "ProvisioningError",
    "ValidateCssError",
]
