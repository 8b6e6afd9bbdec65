# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Single entry point that hands out sysroots by kind and architecture."""

from __future__ import annotations

from pathlib import Path
from types import TracebackType

import requests

from ..architectures import DebianArch
from ..config import Settings
from ..errors import InvalidArchitectureError
from ..process_utils import CommandRunner, run_command
from .chromium import ChromiumSysroot
from .models import SysrootKind
from .release import ReleaseAssetFetcher
from .toolchain import ToolchainSysroot


class SysrootProvisioner:
    """Dispatch :meth:`acquire` calls to the toolchain or Chromium installer.

    A session passed in by the caller stays open; one created here is closed
    by :meth:`close` or on leaving a ``with`` block.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: requests.Session | None = None,
        runner: CommandRunner = run_command,
    ) -> None:
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        fetcher = ReleaseAssetFetcher(
            repository=settings.release_repository,
            version=settings.release_version,
            session=self._session,
            token=settings.github_token,
            user_agent=settings.user_agent,
            attempts=settings.fetch_attempts,
            delay=settings.fetch_delay,
            timeout=settings.fetch_timeout,
        )
        self.toolchain = ToolchainSysroot(settings, fetcher, runner=runner)
        self.chromium = ChromiumSysroot(settings, self._session, runner=runner)

    def __enter__(self) -> SysrootProvisioner:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP session when this provisioner created it."""

        if self._owns_session:
            self._session.close()

    def acquire(self, kind: SysrootKind | str, arch: DebianArch | str) -> Path:
        """Return a local sysroot of ``kind`` for ``arch``.

        Args:
            kind: ``toolchain`` or ``chromium``.
            arch: Debian architecture token.

        Returns:
            Path: Local sysroot path, downloaded and extracted when needed.

        Raises:
            InvalidArchitectureError: If ``arch`` is not a Debian architecture.
            ValueError: If ``kind`` is not a known sysroot kind.
        """

        sysroot_kind = SysrootKind(kind)
        try:
            debian_arch = DebianArch(arch)
        except ValueError as exc:
            raise InvalidArchitectureError("deb", str(arch)) from exc
        if sysroot_kind is SysrootKind.TOOLCHAIN:
            return self.toolchain.acquire(debian_arch)
        return self.chromium.acquire(debian_arch)


__all__ = ["SysrootProvisioner"]
