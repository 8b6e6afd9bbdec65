# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Download, verify and cache the sysroots used to scan native binaries."""

from __future__ import annotations

from .chromium import ChromiumSysroot
from .models import SysrootKind, SysrootRecord
from .provisioner import SysrootProvisioner
from .release import ReleaseAssetFetcher
from .toolchain import ToolchainSysroot

__all__ = [
    "ChromiumSysroot",
    "ReleaseAssetFetcher",
    "SysrootKind",
    "SysrootProvisioner",
    "SysrootRecord",
    "ToolchainSysroot",
]
