# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Debian sysroots pinned by the Electron release the application ships with.

The sysroot manifest lives in the Electron repository at the pinned tag. Each
architecture entry names a tarball stored under its sha1 in blob storage; the
tarball is streamed to disk, verified, unpacked with ``tar`` and discarded.
"""

from __future__ import annotations

import json
import logging
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

import requests

from ..architectures import DebianArch
from ..config import Settings
from ..errors import ConfigError, IntegrityError, ManifestError, TransportError
from ..hashing import CHUNK_SIZE, file_digest
from ..process_utils import CommandRunner, run_command
from .models import SysrootKind, SysrootRecord

LOGGER = logging.getLogger(__name__)

MANIFEST_FILENAME: Final[str] = "sysroots.json"
_TARGET_PATTERN: Final[re.Pattern[str]] = re.compile(r'^target "(.*)"$', re.MULTILINE)
_BUILD_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r'^ms_build_id "(.*)"$', re.MULTILINE)


@dataclass(frozen=True, slots=True)
class ElectronVersion:
    """Electron version pinned in the repository's package-manager rc file."""

    version: str
    build_id: str | None = None


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    """One architecture entry from ``sysroots.json``."""

    tarball: str
    sha1: str
    sysroot_dir: str


def read_electron_version(pin_file: Path) -> ElectronVersion:
    """Parse the ``target "<version>"`` pin from ``pin_file``.

    Raises:
        ConfigError: If the file is unreadable or has no ``target`` line.
    """

    try:
        text = pin_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read version pin file {pin_file}: {exc}") from exc
    target = _TARGET_PATTERN.search(text)
    if target is None:
        raise ConfigError(f"No target version pinned in {pin_file}")
    build_id = _BUILD_ID_PATTERN.search(text)
    return ElectronVersion(target.group(1), build_id.group(1) if build_id else None)


def manifest_key(arch: DebianArch) -> str:
    """Return the ``sysroots.json`` key for ``arch``."""

    if arch is DebianArch.ARMHF:
        return "bullseye_arm"
    return f"bullseye_{arch.value}"


def parse_manifest_entry(manifest: Any, arch: DebianArch) -> ManifestEntry:
    """Return the manifest entry for ``arch``.

    Raises:
        ManifestError: If the entry or one of its fields is missing.
    """

    key = manifest_key(arch)
    entry = manifest.get(key) if isinstance(manifest, dict) else None
    if not isinstance(entry, dict):
        raise ManifestError(f"Sysroot manifest has no entry for {key}")
    try:
        return ManifestEntry(
            tarball=str(entry["Tarball"]),
            sha1=str(entry["Sha1Sum"]),
            sysroot_dir=str(entry["SysrootDir"]),
        )
    except KeyError as exc:
        raise ManifestError(f"Sysroot manifest entry {key} is missing {exc.args[0]}") from exc


class ChromiumSysroot:
    """Provision the Chromium Debian sysroot for one architecture."""

    def __init__(
        self,
        settings: Settings,
        session: requests.Session,
        *,
        runner: CommandRunner = run_command,
    ) -> None:
        self._settings = settings
        self._session = session
        self._runner = runner

    def manifest_url(self) -> str:
        """Return the manifest URL for the pinned Electron version."""

        pin = read_electron_version(self._settings.resolve(self._settings.version_pin_file))
        return self._settings.manifest_url_template.format(version=pin.version)

    def download_manifest(self) -> Any:
        """Download ``sysroots.json`` with ``curl`` and return the parsed document.

        Raises:
            ToolError: If ``curl`` exits with a non-zero status.
            ManifestError: If the downloaded document is not valid JSON.
        """

        url = self.manifest_url()
        with tempfile.TemporaryDirectory() as scratch:
            destination = Path(scratch) / MANIFEST_FILENAME
            command = ["curl", "--fail", "--silent", "--show-error", url, "-o", str(destination)]
            if self._settings.github_token:
                command[1:1] = ["-H", f"Authorization: Bearer {self._settings.github_token}"]
            self._runner(command, capture_output=True)
            try:
                return json.loads(destination.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                raise ManifestError(f"Cannot parse {MANIFEST_FILENAME} from {url}: {exc}") from exc

    def plan(self, arch: DebianArch) -> tuple[SysrootRecord, ManifestEntry]:
        """Return the cache record for ``arch`` together with its manifest entry."""

        entry = parse_manifest_entry(self.download_manifest(), arch)
        directory = self._settings.resolve(self._settings.chromium_sysroot_root) / entry.sysroot_dir
        url = "/".join([self._settings.tarball_url_prefix.rstrip("/"), entry.sha1, entry.tarball])
        record = SysrootRecord(
            arch=arch.value,
            kind=SysrootKind.CHROMIUM,
            directory=directory,
            result=directory,
            identifier=url,
        )
        return record, entry

    def acquire(self, arch: DebianArch) -> Path:
        """Return the Chromium sysroot for ``arch``, installing it when stale.

        Args:
            arch: Debian architecture whose sysroot is required.

        Returns:
            Path: The sysroot directory.

        Raises:
            TransportError: If all download attempts failed.
            IntegrityError: If the tarball's sha1 does not match the manifest.
            ToolError: If ``tar`` fails to unpack the tarball.
        """

        record, entry = self.plan(arch)
        if record.is_current():
            return record.result

        LOGGER.info("Installing Debian %s root image: %s", arch.value, record.directory)
        record.reset()
        tarball = record.directory / entry.tarball
        self._download(record.identifier, tarball)

        actual = file_digest(tarball, "sha1")
        if actual != entry.sha1:
            raise IntegrityError(f"tarball {entry.tarball}", expected=entry.sha1, actual=actual)

        self._runner(["tar", "xf", str(tarball), "-C", str(record.directory)], capture_output=True)
        tarball.unlink()
        record.mark_complete()
        return record.result

    def _download(self, url: str, destination: Path) -> None:
        LOGGER.info("Downloading %s", url)
        attempts = self._settings.download_attempts
        for attempt in range(1, attempts + 1):
            try:
                with (
                    destination.open("wb") as handle,
                    self._session.get(url, stream=True, timeout=self._settings.fetch_timeout) as response,
                ):
                    response.raise_for_status()
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        handle.write(chunk)
                return
            except requests.RequestException as exc:
                LOGGER.error(
                    "Encountered an error during the download attempt %d/%d: %s",
                    attempt,
                    attempts,
                    exc,
                )
        destination.unlink(missing_ok=True)
        raise TransportError(f"Failed to download {url}")


__all__ = [
    "ChromiumSysroot",
    "ElectronVersion",
    "ManifestEntry",
    "manifest_key",
    "parse_manifest_entry",
    "read_electron_version",
]
