# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich console management utilities."""

from __future__ import annotations

import sys
from functools import lru_cache
from typing import Literal, TextIO

from rich.console import Console


def detect_tty(stream: TextIO | None = None) -> bool:
    """Return ``True`` when ``stream`` (default: stdout) is backed by a terminal."""

    target = stream if stream is not None else sys.stdout
    try:
        return target.isatty()
    except (AttributeError, ValueError):
        return False


class RichConsoleManager:
    """Provision Rich :class:`Console` instances keyed by presentation flags."""

    def __init__(self) -> None:
        self._cache: dict[tuple[bool, bool, bool, bool], Console] = {}

    def get(self, *, color: bool, emoji: bool, stderr: bool = False) -> Console:
        """Return a console configured for ``color`` and ``emoji`` preferences.

        Args:
            color: ``True`` when ANSI colour output should be enabled.
            emoji: ``True`` when Rich should render emoji glyphs.
            stderr: ``True`` to write to standard error instead of standard output.

        Returns:
            Console: Cached or newly constructed console matching the preferences.
        """

        tty = detect_tty(sys.stderr if stderr else sys.stdout)
        key = (color, emoji, stderr, tty)
        if key not in self._cache:
            color_system: Literal["auto"] | None = "auto" if color and tty else None
            self._cache[key] = Console(
                color_system=color_system,
                force_terminal=tty,
                no_color=not (color and tty),
                emoji=emoji,
                highlight=False,
                soft_wrap=True,
                stderr=stderr,
            )
        return self._cache[key]


@lru_cache(maxsize=1)
def get_console_manager() -> RichConsoleManager:
    """Return the process-wide :class:`RichConsoleManager`."""

    return RichConsoleManager()


__all__ = ["RichConsoleManager", "detect_tty", "get_console_manager"]
