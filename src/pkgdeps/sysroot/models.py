# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Records describing managed sysroot directories and their marker files."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

from ..errors import CacheError

STAMP_FILENAME: Final[str] = ".stamp"


class SysrootKind(str, Enum):
    """Enumerate the two independently versioned sysroot sources."""

    TOOLCHAIN = "toolchain"
    CHROMIUM = "chromium"


@dataclass(frozen=True, slots=True)
class SysrootRecord:
    """Describe one sysroot cache entry.

    Attributes:
        arch: Architecture token the sysroot targets.
        kind: Which toolchain source produced the sysroot.
        directory: Cache directory that is wiped and rebuilt on refresh.
        result: Path handed back to callers, at or below ``directory``.
        identifier: Archive name or download URL recorded in the marker.
    """

    arch: str
    kind: SysrootKind
    directory: Path
    result: Path
    identifier: str

    @property
    def stamp_path(self) -> Path:
        """Return the marker file co-located with the cache directory."""

        return self.directory / STAMP_FILENAME

    def is_current(self) -> bool:
        """Return ``True`` when the marker records exactly :attr:`identifier`.

        This is an identity check only; the extracted tree is not re-verified.
        """

        stamp = self.stamp_path
        if not stamp.is_file():
            return False
        return stamp.read_text(encoding="utf-8") == self.identifier

    def reset(self) -> None:
        """Delete the cache directory recursively and recreate it empty.

        Raises:
            CacheError: If the old tree cannot be removed or the directory
                cannot be created.
        """

        try:
            if self.directory.is_dir() and not self.directory.is_symlink():
                shutil.rmtree(self.directory)
            elif self.directory.exists() or self.directory.is_symlink():
                self.directory.unlink()
            self.directory.mkdir(parents=True)
        except OSError as exc:
            raise CacheError(f"Unable to reset sysroot cache {self.directory}: {exc}") from exc

    def mark_complete(self) -> None:
        """Record :attr:`identifier` once the sysroot is fully materialised."""

        self.stamp_path.write_text(self.identifier, encoding="utf-8")


__all__ = ["STAMP_FILENAME", "SysrootKind", "SysrootRecord"]
