# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture
def css_dir() -> Path:
    """Return the directory holding the sample stylesheets."""
    return Path(__file__).resolve().parent / "css"


@pytest.fixture
def write_css(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper writing a stylesheet below ``tmp_path``."""

    def _write(name: str, body: str = "a { color: red; }\n") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def engine_jar(tmp_path: Path) -> Path:
    """Return a file that passes the ZIP signature check."""
    jar = tmp_path / "engine" / "css-validator.jar"
    jar.parent.mkdir(parents=True)
    jar.write_bytes(b"PK\x03\x04fake-jar")
    return jar
