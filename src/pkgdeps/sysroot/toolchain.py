# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Toolchain sysroots published as GitHub release assets."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

from ..architectures import DebianArch
from ..config import Settings
from ..errors import ConfigError, MissingChecksumError
from ..hashing import lookup_checksum
from ..process_utils import CommandRunner, run_command
from .models import SysrootKind, SysrootRecord
from .release import ReleaseAssetFetcher

LOGGER = logging.getLogger(__name__)

TOOLCHAIN_TRIPLES: Final[dict[DebianArch, str]] = {
    DebianArch.AMD64: "x86_64-linux-gnu",
    DebianArch.ARM64: "aarch64-linux-gnu",
    DebianArch.ARMHF: "arm-rpi-linux-gnueabihf",
}


def archive_for(arch: DebianArch) -> tuple[str, str]:
    """Return ``(archive name, platform triple)`` for ``arch``."""

    triple = TOOLCHAIN_TRIPLES[arch]
    return f"{triple}.tar.gz", triple


class ToolchainSysroot:
    """Provision the cross toolchain sysroot for one Debian architecture."""

    def __init__(
        self,
        settings: Settings,
        fetcher: ReleaseAssetFetcher,
        *,
        runner: CommandRunner = run_command,
    ) -> None:
        self._settings = settings
        self._fetcher = fetcher
        self._runner = runner

    def plan(self, arch: DebianArch) -> tuple[SysrootRecord, str]:
        """Return the cache record for ``arch`` and the archive's expected sha256.

        Raises:
            MissingChecksumError: If the checksum table has no entry for the archive.
            ConfigError: If the checksum table cannot be read.
        """

        archive_name, triple = archive_for(arch)
        table = self._settings.resolve(self._settings.checksum_file)
        try:
            checksum = lookup_checksum(table, archive_name)
        except OSError as exc:
            raise ConfigError(f"Unable to read checksum table {table}: {exc}") from exc
        if checksum is None:
            raise MissingChecksumError(archive_name)

        directory = self._settings.toolchain_cache_dir(arch.value)
        record = SysrootRecord(
            arch=arch.value,
            kind=SysrootKind.TOOLCHAIN,
            directory=directory,
            result=directory / triple / triple / "sysroot",
            identifier=archive_name,
        )
        return record, checksum

    def acquire(self, arch: DebianArch) -> Path:
        """Return the sysroot path for ``arch``, installing it when stale.

        Args:
            arch: Debian architecture whose toolchain sysroot is required.

        Returns:
            Path: ``<cache>/<triple>/<triple>/sysroot``.
        """

        record, checksum = self.plan(arch)
        if record.is_current():
            return record.result

        LOGGER.info("Installing %s root image: %s", arch.value, record.directory)
        record.reset()
        content = self._fetcher.fetch(record.identifier, sha256=checksum)
        self._runner(
            ["tar", "-xz", "-C", str(record.directory)],
            input=content,
            text=False,
            capture_output=True,
        )
        LOGGER.info("Fetch complete!")
        record.mark_complete()
        return record.result


__all__ = ["TOOLCHAIN_TRIPLES", "ToolchainSysroot", "archive_for"]
