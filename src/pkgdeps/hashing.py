# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Digest helpers and the archive checksum table."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Final

CHUNK_SIZE: Final[int] = 1024 * 1024


def file_digest(path: Path, algorithm: str = "sha1") -> str:
    """Return the hex digest of ``path`` read one MiB at a time.

    Args:
        path: File to hash.
        algorithm: Any algorithm name accepted by :func:`hashlib.new`.

    Returns:
        str: Lowercase hexadecimal digest.
    """

    hasher = hashlib.new(algorithm)
    with path.open("rb") as handle:
        while chunk := handle.read(CHUNK_SIZE):
            hasher.update(chunk)
    return hasher.hexdigest()


def bytes_digest(content: bytes, algorithm: str = "sha256") -> str:
    """Return the hex digest of an in-memory payload."""

    return hashlib.new(algorithm, content).hexdigest()


def lookup_checksum(table: Path, name: str) -> str | None:
    """Return the checksum recorded for ``name`` in a ``<checksum> <name>`` table.

    Args:
        table: Text file with one whitespace-separated entry per line.
        name: Archive name to look up.

    Returns:
        str | None: Matching checksum, or ``None`` when the name is absent.
    """

    for line in table.read_text(encoding="utf-8").splitlines():
        fields = line.split()
        if len(fields) >= 2 and fields[1] == name:
            return fields[0]
    return None


__all__ = ["CHUNK_SIZE", "bytes_digest", "file_digest", "lookup_checksum"]
