# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Expand a validation target into the CSS files it covers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

from .errors import InputNotCssError, InputNotFoundError

CSS_SUFFIX: Final[str] = ".css"


def absolute_path(target: str | os.PathLike[str]) -> Path:
    """Return ``target`` as an absolute, normalised path without resolving symlinks."""

    return Path(os.path.abspath(os.fspath(target)))


def is_css_file(path: Path) -> bool:
    """Return ``True`` when ``path`` carries a ``.css`` suffix (any case)."""

    return path.suffix.lower() == CSS_SUFFIX


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(".") for part in relative.parts)


def expand_files(target: str | os.PathLike[str]) -> list[Path]:
    """Return the absolute CSS files selected by ``target``.

    A file target yields itself and its suffix is matched in any case. A
    directory yields every regular ``*.css`` file beneath it, matched case
    sensitively and skipping hidden files and directories, sorted by POSIX
    path so runs are reproducible.

    Raises:
        InputNotFoundError: If ``target`` does not exist.
        InputNotCssError: If ``target`` is a file without a ``.css`` suffix.
    """

    root = absolute_path(target)
    if not root.exists():
        raise InputNotFoundError(f"path not found {target}")

    if not root.is_dir():
        if not is_css_file(root):
            raise InputNotCssError(f"not a css file {target}")
        return [root]

    found = [
        path
        for path in root.rglob(f"*{CSS_SUFFIX}", case_sensitive=True)
        if path.is_file() and not _is_hidden(path.relative_to(root))
    ]
    return sorted(found, key=lambda path: path.as_posix())


__all__ = ["CSS_SUFFIX", "absolute_path", "expand_files", "is_css_file"]
