# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

import logging
import sys

from rich.text import Text

from .console import get_console_manager

PACKAGE_LOGGER = "w3c_validate_css"
VERBOSE_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _print_line(msg: str, *, style: str, use_emoji: bool, use_color: bool, stderr: bool) -> None:
    console = get_console_manager().get(color=use_color, emoji=use_emoji, stderr=stderr)
    text = Text(msg)
    if use_color:
        text.stylize(style)
    console.print(text)


def fail(msg: str, *, use_emoji: bool = True, use_color: bool = True) -> None:
    """Emit an error message on stderr."""

    _print_line(msg, style="red", use_emoji=use_emoji, use_color=use_color, stderr=True)


class VerboseHandler(logging.StreamHandler):
    """Stderr handler installed by :func:`enable_verbose_logging`."""


def enable_verbose_logging() -> None:
    """Stream debug records of the package logger to stderr."""

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    if any(isinstance(handler, VerboseHandler) for handler in logger.handlers):
        return
    handler = VerboseHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter(VERBOSE_FORMAT))
    logger.addHandler(handler)


__all__ = ["PACKAGE_LOGGER", "VerboseHandler", "enable_verbose_logging", "fail"]
