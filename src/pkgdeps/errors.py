# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the provisioner and the reconciler."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final


class PkgDepsError(Exception):
    """Base class for every failure raised by pkgdeps."""


class ConfigError(PkgDepsError):
    """Raised when configuration input is invalid."""


_ARCH_LABELS: Final[dict[str, str]] = {"deb": "Debian", "rpm": "RPM"}


class InvalidArchitectureError(PkgDepsError):
    """Raised when an architecture token is not valid for a package type."""

    def __init__(self, package_type: str, arch: str) -> None:
        label = _ARCH_LABELS.get(package_type)
        if label is None:
            message = f"Unknown package type {package_type!r} (expected deb or rpm)"
        else:
            message = f"Invalid {label} arch string {arch}"
        super().__init__(message)
        self.package_type = package_type
        self.arch = arch


class MissingChecksumError(PkgDepsError):
    """Raised when the checksum table has no entry for an archive."""

    def __init__(self, archive_name: str) -> None:
        super().__init__(f"Could not find checksum for {archive_name}")
        self.archive_name = archive_name


class CacheError(PkgDepsError):
    """Raised when a sysroot cache directory cannot be reset."""


class ManifestError(PkgDepsError):
    """Raised when the sysroot manifest lacks the requested architecture."""


class TransportError(PkgDepsError):
    """Raised once a download has exhausted all of its attempts."""


class IntegrityError(PkgDepsError):
    """Raised when downloaded content does not match its expected digest."""

    def __init__(self, subject: str, *, expected: str, actual: str) -> None:
        super().__init__(f"Checksum mismatch for {subject} (expected {expected}, actual {actual})")
        self.subject = subject
        self.expected = expected
        self.actual = actual


class ToolError(PkgDepsError):
    """Raised when an external tool exits with a non-zero status."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class DependencyDriftError(PkgDepsError):
    """Raised in strict mode when computed dependencies differ from the baseline."""

    def __init__(self, message: str, *, added: Sequence[str], removed: Sequence[str]) -> None:
        super().__init__(message)
        self.added = tuple(added)
        self.removed = tuple(removed)


__all__ = [
    "CacheError",
    "ConfigError",
    "DependencyDriftError",
    "IntegrityError",
    "InvalidArchitectureError",
    "ManifestError",
    "MissingChecksumError",
    "PkgDepsError",
    "ToolError",
    "TransportError",
]
