# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Static values shared by provisioning and invocation."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Final

DEFAULT_CACHE_DIR: Final[Path] = Path(tempfile.gettempdir()) / "w3c-validate-css"
ENGINE_FILENAME: Final[str] = "css-validator.jar"
PARTIAL_SUFFIX: Final[str] = ".part"

ENGINE_SOURCES: Final[tuple[str, ...]] = (
    "https://github.com/w3c/css-validator/releases/latest/download/css-validator.jar",
    "https://jigsaw.w3.org/css-validator/DOWNLOAD/css-validator.jar",
)

# Leading bytes of a ZIP local file header; every JAR starts with them.
ZIP_SIGNATURE: Final[bytes] = b"PK"

DOWNLOAD_USER_AGENT: Final[str] = "curl/8 (+python-requests)"
DEFAULT_DOWNLOAD_TIMEOUT: Final[float] = 60.0
DOWNLOAD_CHUNK_SIZE: Final[int] = 64 * 1024

JAVA_EXECUTABLE: Final[str] = "java"

PROXY_ENV_VARS: Final[tuple[str, ...]] = (
    "http_proxy",
    "https_proxy",
    "no_proxy",
    "HTTP_PROXY",
    "HTTPS_PROXY",
    "NO_PROXY",
)

JVM_PROXY_FLAGS: Final[tuple[str, ...]] = (
    "-Djava.net.useSystemProxies=false",
    "-Dhttp.proxyHost=",
    "-Dhttp.proxyPort=",
    "-Dhttps.proxyHost=",
    "-Dhttps.proxyPort=",
)

ENGINE_LANGUAGE: Final[str] = "en"
ENGINE_MEDIUM: Final[str] = "all"
ENGINE_OUTPUT_FORMAT: Final[str] = "json"

TIMEOUT_RETURNCODE: Final[int] = 124
SPAWN_FAILURE_RETURNCODE: Final[int] = 1

__all__ = [
    "DEFAULT_CACHE_DIR",
    "DEFAULT_DOWNLOAD_TIMEOUT",
    "DOWNLOAD_CHUNK_SIZE",
    "DOWNLOAD_USER_AGENT",
    "ENGINE_FILENAME",
    "ENGINE_LANGUAGE",
    "ENGINE_MEDIUM",
    "ENGINE_OUTPUT_FORMAT",
    "ENGINE_SOURCES",
    "JAVA_EXECUTABLE",
    "JVM_PROXY_FLAGS",
    "PARTIAL_SUFFIX",
    "PROXY_ENV_VARS",
    "SPAWN_FAILURE_RETURNCODE",
    "TIMEOUT_RETURNCODE",
    "ZIP_SIGNATURE",
]
