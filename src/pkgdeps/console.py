# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich consoles for status output.

Commands print their result (a sysroot path or a dependency list) on stdout so
it can be captured by build scripts. Status lines therefore go to stderr.
"""

from __future__ import annotations

import sys
from enum import Enum
from functools import lru_cache
from typing import Literal, TextIO

from rich.console import Console


class Stream(str, Enum):
    """Standard stream a console writes to."""

    STDOUT = "stdout"
    STDERR = "stderr"


def _resolve(stream: Stream) -> TextIO:
    return sys.stderr if stream is Stream.STDERR else sys.stdout


def detect_tty(stream: Stream = Stream.STDOUT) -> bool:
    """Return ``True`` when ``stream`` is attached to a terminal."""

    try:
        return _resolve(stream).isatty()
    except (AttributeError, ValueError):
        return False


class RichConsoleManager:
    """Hand out Rich consoles keyed by stream, colour and emoji settings."""

    def __init__(self) -> None:
        self._cache: dict[tuple[Stream, bool, bool, bool], Console] = {}

    def get(self, *, color: bool, emoji: bool, stream: Stream = Stream.STDERR) -> Console:
        """Return a console for ``stream`` honouring ``color`` and ``emoji``.

        Colour is only enabled when ``stream`` is a terminal. The console does
        not hold a file handle; it looks the stream up on every write, which
        keeps it usable after test runners swap ``sys.stderr``.

        Args:
            color: ``True`` when ANSI colour output is wanted.
            emoji: ``True`` when Rich should render emoji glyphs.
            stream: Standard stream to write to.

        Returns:
            Console: Cached console matching the arguments.
        """

        tty = detect_tty(stream)
        key = (stream, color, emoji, tty)
        console = self._cache.get(key)
        if console is None:
            color_system: Literal["auto"] | None = "auto" if color and tty else None
            console = Console(
                stderr=stream is Stream.STDERR,
                color_system=color_system,
                force_terminal=tty,
                no_color=not (color and tty),
                emoji=emoji,
                soft_wrap=True,
            )
            self._cache[key] = console
        return console


@lru_cache(maxsize=1)
def get_console_manager() -> RichConsoleManager:
    """Return the process-wide :class:`RichConsoleManager`."""

    return RichConsoleManager()


__all__ = ["RichConsoleManager", "Stream", "detect_tty", "get_console_manager"]
