# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate the binaries of a built application that need dependency scanning."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..config import Settings
from ..errors import ToolError
from ..process_utils import CommandRunner, run_command

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanTargets:
    """Files grouped by the sysroot they are resolved against.

    Attributes:
        native_modules: Native Node modules plus the auxiliary tunnel binary.
        runtime: Main executable, sandbox helper and crash handler.
    """

    native_modules: tuple[Path, ...]
    runtime: tuple[Path, ...]

    @property
    def all_files(self) -> tuple[Path, ...]:
        """Return every file to scan, native modules first."""

        return self.native_modules + self.runtime


def find_native_modules(root: Path, pattern: str, *, runner: CommandRunner = run_command) -> list[Path]:
    """Return files below ``root`` whose names match ``pattern``.

    Raises:
        ToolError: If ``find`` exits with a non-zero status.
    """

    completed = runner(["find", str(root), "-name", pattern], capture_output=True)
    return [Path(line) for line in str(completed.stdout).splitlines() if line.strip()]


def collect_scan_targets(
    build_dir: Path,
    application_name: str,
    settings: Settings,
    *,
    runner: CommandRunner = run_command,
) -> ScanTargets | None:
    """Assemble the files the extractors will inspect.

    Args:
        build_dir: Root of the built application.
        application_name: File name of the main executable.
        settings: Run configuration (layout names and failure policy).
        runner: Command runner used to invoke ``find``.

    Returns:
        ScanTargets | None: Files to scan, or ``None`` when enumeration failed
        and ``settings.allow_empty_scan`` permits carrying on.

    Raises:
        ToolError: If enumeration fails and empty scans are not allowed.
    """

    modules_root = build_dir / settings.native_modules_subdir
    try:
        native_modules = find_native_modules(modules_root, settings.native_module_pattern, runner=runner)
    except ToolError as exc:
        if not settings.allow_empty_scan:
            raise
        LOGGER.error("Error finding files:\n%s", exc.stderr or exc)
        return None

    native_modules.append(build_dir / "bin" / settings.tunnel_application_name)
    runtime = (
        build_dir / application_name,
        build_dir / settings.sandbox_name,
        build_dir / settings.crash_handler_name,
    )
    return ScanTargets(tuple(native_modules), runtime)


__all__ = ["ScanTargets", "collect_scan_targets", "find_native_modules"]
