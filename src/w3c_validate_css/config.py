# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loading for w3c_validate_css.

Settings are layered: model defaults, then the ``[tool.w3c-validate-css]``
table of ``pyproject.toml``, then explicit command-line overrides.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import DEFAULT_CACHE_DIR, DEFAULT_DOWNLOAD_TIMEOUT, ENGINE_SOURCES, JAVA_EXECUTABLE
from .errors import ConfigError
from .models import ValidationConfig

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
TOOL_SECTION: Final[str] = "w3c-validate-css"

_VALIDATION_KEYS: Final[dict[str, str]] = {
    "profile": "profile",
    "warning_level": "warning_level",
    "warnings": "warning_level",
    "include_deprecations": "include_deprecations",
    "deprecations": "include_deprecations",
    "errors_only": "errors_only",
    "tolerate": "tolerate",
    "json": "output_json",
    "output_json": "output_json",
}

_ENGINE_KEYS: Final[dict[str, str]] = {
    "cache_dir": "cache_dir",
    "sources": "sources",
    "download_timeout": "download_timeout",
    "timeout": "invocation_timeout",
    "invocation_timeout": "invocation_timeout",
    "java": "java",
}


class EngineSettings(BaseModel):
    """Where the engine archive lives and how it is fetched and run."""

    model_config = ConfigDict(frozen=True)

    cache_dir: Path = DEFAULT_CACHE_DIR
    sources: tuple[str, ...] = ENGINE_SOURCES
    download_timeout: float = Field(default=DEFAULT_DOWNLOAD_TIMEOUT, gt=0)
    invocation_timeout: float | None = Field(default=None, gt=0)
    java: str = JAVA_EXECUTABLE


class Settings(BaseModel):
    """Complete configuration for a CLI run."""

    model_config = ConfigDict(frozen=True)

    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    engine: EngineSettings = Field(default_factory=EngineSettings)

    def with_overrides(self, overrides: Mapping[str, Any]) -> Settings:
        """Return a copy with non-``None`` ``overrides`` applied.

        Keys use the same vocabulary as the configuration file.

        Raises:
            ConfigError: If an override is unknown or fails validation.
        """

        provided = {key: value for key, value in overrides.items() if value is not None}
        return _merge(self, provided, source="command line")


def _split_fragment(fragment: Mapping[str, Any], *, source: str) -> tuple[dict[str, Any], dict[str, Any]]:
    validation: dict[str, Any] = {}
    engine: dict[str, Any] = {}
    for raw_key, value in fragment.items():
        key = str(raw_key).replace("-", "_")
        if key in _VALIDATION_KEYS:
            validation[_VALIDATION_KEYS[key]] = value
        elif key in _ENGINE_KEYS:
            engine[_ENGINE_KEYS[key]] = value
        else:
            raise ConfigError(f"{source}: unknown option '{raw_key}'")
    return validation, engine


def _merge(settings: Settings, fragment: Mapping[str, Any], *, source: str) -> Settings:
    validation, engine = _split_fragment(fragment, source=source)
    try:
        return Settings(
            validation=ValidationConfig.model_validate(
                {**settings.validation.model_dump(), **validation},
            ),
            engine=EngineSettings.model_validate({**settings.engine.model_dump(), **engine}),
        )
    except ValidationError as exc:
        raise ConfigError(f"{source}: {exc}") from exc


def read_pyproject_section(path: Path) -> dict[str, Any]:
    """Return the ``[tool.w3c-validate-css]`` table of ``path`` (empty when absent).

    Raises:
        ConfigError: If the file is not valid TOML or the section is not a table.
    """

    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    section = data.get("tool", {}).get(TOOL_SECTION, {})
    if not isinstance(section, Mapping):
        raise ConfigError(f"{path}: [tool.{TOOL_SECTION}] must be a table")
    return dict(section)


def load_config(project_root: Path) -> Settings:
    """Load settings for ``project_root`` from its ``pyproject.toml``."""

    pyproject = project_root / PYPROJECT_FILENAME
    fragment = read_pyproject_section(pyproject)
    if not fragment:
        return Settings()
    return _merge(Settings(), fragment, source=str(pyproject))


__all__ = [
    "EngineSettings",
    "PYPROJECT_FILENAME",
    "Settings",
    "TOOL_SECTION",
    "load_config",
    "read_pyproject_section",
]
