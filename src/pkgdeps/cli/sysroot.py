# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``pkgdeps sysroot`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import load_settings
from ..errors import ConfigError, InvalidArchitectureError, PkgDepsError
from ..logging import configure_logging, fail
from ..sysroot import SysrootKind, SysrootProvisioner
from .options import COLOR_OPTION, EMOJI_OPTION, ROOT_OPTION, VERBOSE_OPTION


def sysroot_command(
    kind: Annotated[SysrootKind, typer.Argument(help="Sysroot source: toolchain or chromium.")],
    arch: Annotated[str, typer.Argument(help="Debian architecture (amd64, arm64, armhf).")],
    root: ROOT_OPTION = Path.cwd(),
    sysroot_dir: Annotated[
        Path | None,
        typer.Option("--sysroot-dir", help="Override the toolchain sysroot cache directory."),
    ] = None,
    emoji: EMOJI_OPTION = True,
    color: COLOR_OPTION = True,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Download (when stale) and print the path of a sysroot."""

    configure_logging(verbose=verbose)
    try:
        settings = load_settings(root, overrides={"sysroot_dir": sysroot_dir})
        with SysrootProvisioner(settings) as provisioner:
            path = provisioner.acquire(kind, arch)
    except (ConfigError, InvalidArchitectureError) as exc:
        fail(str(exc), use_emoji=emoji, use_color=color)
        raise typer.Exit(code=2) from exc
    except PkgDepsError as exc:
        fail(str(exc), use_emoji=emoji, use_color=color)
        raise typer.Exit(code=1) from exc

    typer.echo(str(path))


__all__ = ["sysroot_command"]
