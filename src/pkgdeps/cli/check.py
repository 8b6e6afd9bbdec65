# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``pkgdeps check`` command."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from ..architectures import PackageType
from ..config import load_settings
from ..deps import DependencyReconciler
from ..errors import ConfigError, DependencyDriftError, InvalidArchitectureError, PkgDepsError
from ..logging import configure_logging, fail
from .options import COLOR_OPTION, EMOJI_OPTION, ROOT_OPTION, VERBOSE_OPTION


def check_command(
    package_type: Annotated[PackageType, typer.Argument(help="Package format: deb or rpm.")],
    build_dir: Annotated[Path, typer.Argument(help="Directory containing the built application.")],
    application_name: Annotated[str, typer.Argument(help="File name of the main executable.")],
    arch: Annotated[str, typer.Argument(help="Architecture token valid for the package format.")],
    root: ROOT_OPTION = Path.cwd(),
    strict: Annotated[
        bool | None,
        typer.Option(
            "--strict/--no-strict",
            help="Fail on dependency drift instead of warning (defaults to configuration).",
            show_default=False,
        ),
    ] = None,
    baseline_dir: Annotated[
        Path | None,
        typer.Option("--baseline-dir", help="Directory with deb.json/rpm.json reference lists."),
    ] = None,
    allow_empty_scan: Annotated[
        bool | None,
        typer.Option(
            "--allow-empty-scan/--no-allow-empty-scan",
            help="Return an empty list when native modules cannot be enumerated.",
            show_default=False,
        ),
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the list as a JSON array.")] = False,
    emoji: EMOJI_OPTION = True,
    color: COLOR_OPTION = True,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Compute package dependencies and compare them with the reviewed baseline."""

    configure_logging(verbose=verbose)
    try:
        settings = load_settings(
            root,
            overrides={
                "strict": strict,
                "baseline_dir": baseline_dir,
                "allow_empty_scan": allow_empty_scan,
            },
        )
        with DependencyReconciler(settings) as reconciler:
            dependencies = reconciler.reconcile(
                package_type,
                build_dir.resolve(),
                application_name,
                arch,
            )
    except DependencyDriftError as exc:
        fail(str(exc), use_emoji=emoji, use_color=color)
        raise typer.Exit(code=1) from exc
    except (ConfigError, InvalidArchitectureError) as exc:
        fail(str(exc), use_emoji=emoji, use_color=color)
        raise typer.Exit(code=2) from exc
    except PkgDepsError as exc:
        fail(str(exc), use_emoji=emoji, use_color=color)
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(json.dumps(dependencies, indent=2))
        return
    for dependency in dependencies:
        typer.echo(dependency)


__all__ = ["check_command"]
