# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Package types and the architecture tokens each of them accepts."""

from __future__ import annotations

from enum import Enum
from typing import Final

from .errors import InvalidArchitectureError


class PackageType(str, Enum):
    """Enumerate the Linux package formats we compute dependencies for."""

    DEB = "deb"
    RPM = "rpm"


class DebianArch(str, Enum):
    """Architecture tokens accepted for Debian packages."""

    AMD64 = "amd64"
    ARM64 = "arm64"
    ARMHF = "armhf"


class RpmArch(str, Enum):
    """Architecture tokens accepted for RPM packages."""

    X86_64 = "x86_64"
    AARCH64 = "aarch64"
    ARMV7HL = "armv7hl"


ArchToken = DebianArch | RpmArch

_ARCH_ENUMS: Final[dict[PackageType, type[DebianArch] | type[RpmArch]]] = {
    PackageType.DEB: DebianArch,
    PackageType.RPM: RpmArch,
}

# Library directories dpkg-shlibdeps searches inside a sysroot.
DEBIAN_LIBRARY_TRIPLES: Final[dict[DebianArch, str]] = {
    DebianArch.AMD64: "x86_64-linux-gnu",
    DebianArch.ARM64: "aarch64-linux-gnu",
    DebianArch.ARMHF: "arm-linux-gnueabihf",
}


def is_debian_arch(value: str) -> bool:
    """Return ``True`` when ``value`` is a Debian architecture token."""

    return value in {member.value for member in DebianArch}


def is_rpm_arch(value: str) -> bool:
    """Return ``True`` when ``value`` is an RPM architecture token."""

    return value in {member.value for member in RpmArch}


def validate_architecture(package_type: PackageType | str, arch: str) -> ArchToken:
    """Return the typed architecture for ``arch`` or fail without fallback.

    Args:
        package_type: Package format whose enumeration ``arch`` must belong to.
        arch: Raw architecture token supplied by the caller.

    Returns:
        ArchToken: Enum member matching ``arch``.

    Raises:
        InvalidArchitectureError: If ``arch`` is not valid for ``package_type``
            or ``package_type`` itself is unknown.
    """

    try:
        kind = PackageType(package_type)
    except ValueError as exc:
        raise InvalidArchitectureError(str(package_type), arch) from exc
    enum_type = _ARCH_ENUMS[kind]
    try:
        return enum_type(arch)
    except ValueError as exc:
        raise InvalidArchitectureError(kind.value, arch) from exc


__all__ = [
    "DEBIAN_LIBRARY_TRIPLES",
    "ArchToken",
    "DebianArch",
    "PackageType",
    "RpmArch",
    "is_debian_arch",
    "is_rpm_arch",
    "validate_architecture",
]
