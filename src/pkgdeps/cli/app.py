# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the pkgdeps commands."""

from __future__ import annotations

import typer

from .check import check_command
from .sysroot import sysroot_command

app = typer.Typer(
    help="Sysroot provisioning and shared-library dependency checks for Linux packages.",
    no_args_is_help=True,
    add_completion=False,
)
app.command(name="sysroot")(sysroot_command)
app.command(name="check")(check_command)


def main() -> None:
    """Run the ``pkgdeps`` console script."""

    app()


__all__ = ["app", "main"]
