# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared-library dependency extractors backed by distribution tooling.

Both extractors treat the underlying tool as a black box: they hand it one
binary at a time and turn its output into a set of requirement strings.
"""

from __future__ import annotations

import logging
import stat
from collections.abc import Sequence
from pathlib import Path
from typing import Final, Protocol

from ..architectures import DEBIAN_LIBRARY_TRIPLES, DebianArch
from ..process_utils import CommandRunner, run_command

LOGGER = logging.getLogger(__name__)

SHLIBS_DEPENDS_PREFIX: Final[str] = "shlibs:Depends="
FIND_REQUIRES: Final[str] = "/usr/lib/rpm/find-requires"
# Chromium's rpm spec always requires this rpmlib feature.
RPM_ADDITIONAL_DEPS: Final[tuple[str, ...]] = ("rpmlib(FileDigests) <= 4.6.0-1",)


class DependencyExtractor(Protocol):
    """Return one dependency set per scanned file."""

    def extract(
        self,
        files: Sequence[Path],
        arch: str | None = None,
        sysroot: Path | None = None,
    ) -> list[set[str]]:
        """Scan ``files`` and return their library requirements.

        Args:
            files: Binaries to inspect.
            arch: Target architecture token, when the tool needs one.
            sysroot: Resolution context for library lookups, when applicable.

        Returns:
            list[set[str]]: Requirement strings per file (plus any extras).
        """
        ...


def warn_if_not_executable(path: Path) -> None:
    """Log a warning when ``path`` is missing or lacks the owner-executable bit."""

    try:
        mode = path.stat().st_mode
    except OSError:
        LOGGER.warning("Tried to stat %s but failed.", path)
        return
    if not mode & stat.S_IXUSR:
        LOGGER.warning("Binary %s needs to have an executable bit set.", path)


class DpkgShlibdepsExtractor:
    """Compute Debian ``Depends`` entries with ``dpkg-shlibdeps``."""

    def __init__(self, *, runner: CommandRunner = run_command, executable: str = "dpkg-shlibdeps") -> None:
        self._runner = runner
        self._executable = executable

    def command_for(self, binary: Path, arch: DebianArch, sysroot: Path) -> list[str]:
        """Return the ``dpkg-shlibdeps`` invocation for one binary."""

        triple = DEBIAN_LIBRARY_TRIPLES[arch]
        return [
            self._executable,
            "--ignore-weak-undefined",
            f"-l{sysroot}/usr/lib/{triple}",
            f"-l{sysroot}/lib/{triple}",
            f"-l{sysroot}/usr/lib",
            "-O",
            "-e",
            str(binary.resolve()),
        ]

    def extract(
        self,
        files: Sequence[Path],
        arch: str | None = None,
        sysroot: Path | None = None,
    ) -> list[set[str]]:
        if arch is None or sysroot is None:
            raise ValueError("dpkg-shlibdeps requires both an architecture and a sysroot")
        debian_arch = DebianArch(arch)
        return [self._extract_one(path, debian_arch, sysroot) for path in files]

    def _extract_one(self, binary: Path, arch: DebianArch, sysroot: Path) -> set[str]:
        warn_if_not_executable(binary)
        completed = self._runner(
            self.command_for(binary, arch, sysroot),
            cwd=sysroot,
            capture_output=True,
        )
        depends = ""
        for line in str(completed.stdout).rstrip().splitlines():
            if line.startswith(SHLIBS_DEPENDS_PREFIX):
                depends = line[len(SHLIBS_DEPENDS_PREFIX) :]
        return {entry for entry in depends.split(", ") if entry}


class RpmFindRequiresExtractor:
    """Compute RPM ``Requires`` entries with rpm's ``find-requires`` script."""

    def __init__(
        self,
        *,
        runner: CommandRunner = run_command,
        executable: str = FIND_REQUIRES,
        additional: Sequence[str] = RPM_ADDITIONAL_DEPS,
    ) -> None:
        self._runner = runner
        self._executable = executable
        self._additional = tuple(additional)

    def extract(
        self,
        files: Sequence[Path],
        arch: str | None = None,
        sysroot: Path | None = None,
    ) -> list[set[str]]:
        del arch, sysroot
        dependencies = [self._extract_one(path) for path in files]
        if self._additional:
            dependencies.append(set(self._additional))
        return dependencies

    def _extract_one(self, binary: Path) -> set[str]:
        warn_if_not_executable(binary)
        completed = self._runner(
            [self._executable],
            input=f"{binary}\n",
            capture_output=True,
        )
        return set(str(completed.stdout).rstrip("\n").split("\n"))


__all__ = [
    "RPM_ADDITIONAL_DEPS",
    "SHLIBS_DEPENDS_PREFIX",
    "DependencyExtractor",
    "DpkgShlibdepsExtractor",
    "RpmFindRequiresExtractor",
    "warn_if_not_executable",
]
