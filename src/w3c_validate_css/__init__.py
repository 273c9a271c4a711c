# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run the W3C CSS validator and normalise its output into typed results."""

from __future__ import annotations

from .errors import (
    ConfigError,
    HostUnavailableError,
    InputNotCssError,
    InputNotFoundError,
    NoStructuredOutputError,
    ProvisioningError,
    ValidateCssError,
)
from .models import Diagnostic, FileResult, Profile, RunSummary, Severity, ValidationConfig
from .provisioning import EngineProvisioner, default_provisioner
from .validator import Validator, validate

__all__ = [
    "ConfigError",
    "Diagnostic",
    "EngineProvisioner",
    "FileResult",
    "HostUnavailableError",
    "InputNotCssError",
    "InputNotFoundError",
    "NoStructuredOutputError",
    "Profile",
    "ProvisioningError",
    "RunSummary",
    "Severity",
    "ValidateCssError",
    "ValidationConfig",
    "Validator",
    "default_provisioner",
    "validate",
]
