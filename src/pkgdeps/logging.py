# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command-line status output and routing for library log records."""

from __future__ import annotations

import logging
import sys

from rich.text import Text

from .console import Stream, detect_tty, get_console_manager

PACKAGE_LOGGER = "pkgdeps"
_HANDLER_ATTR = "_pkgdeps_handler"


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print a failure line on stderr.

    Args:
        msg: Message to print; may span several lines (drift reports do).
        use_emoji: Prefix the message with a cross mark.
        use_color: Force colour on or off; ``None`` follows TTY detection.
    """

    color_enabled = detect_tty(Stream.STDERR) if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=use_emoji)
    text = Text(f"{emoji('❌ ', use_emoji)}{msg}")
    if color_enabled:
        text.stylize("red")
    console.print(text)


def configure_logging(*, verbose: bool) -> logging.Logger:
    """Stream library log records to stderr.

    Args:
        verbose: Emit debug records when true, otherwise info and above.

    Returns:
        logging.Logger: The configured package logger.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    previous = getattr(logger, _HANDLER_ATTR, None)
    if previous is not None:
        logger.removeHandler(previous)
    # Rebind on every call; sys.stderr may have been swapped since the last run.
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    setattr(logger, _HANDLER_ATTR, handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger


__all__ = ["PACKAGE_LOGGER", "configure_logging", "emoji", "fail"]
