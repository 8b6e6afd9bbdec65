# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Checked-in reference dependency lists, one JSON document per package type."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Final

from ..architectures import PackageType
from ..errors import ConfigError

DATA_PACKAGE: Final[str] = "pkgdeps.data.baselines"


@dataclass(frozen=True, slots=True)
class BaselineTable:
    """Read-only mapping from architecture token to its expected dependencies."""

    package_type: PackageType
    entries: Mapping[str, tuple[str, ...]]
    source: str

    def lookup(self, arch: str) -> tuple[str, ...]:
        """Return the expected dependencies for ``arch`` (empty when unknown)."""

        return self.entries.get(arch, ())


def _parse(payload: Any, *, source: str) -> dict[str, tuple[str, ...]]:
    if not isinstance(payload, Mapping):
        raise ConfigError(f"Baseline {source} must be a JSON object keyed by architecture")
    entries: dict[str, tuple[str, ...]] = {}
    for arch, values in payload.items():
        if not isinstance(values, list) or not all(isinstance(value, str) for value in values):
            raise ConfigError(f"Baseline {source} entry {arch!r} must be a list of strings")
        entries[str(arch)] = tuple(values)
    return entries


def load_baseline(package_type: PackageType | str, baseline_dir: Path | None = None) -> BaselineTable:
    """Load the reference lists for ``package_type``.

    Args:
        package_type: ``deb`` or ``rpm``.
        baseline_dir: Directory holding ``deb.json``/``rpm.json``. The lists
            shipped with the package are used when omitted.

    Returns:
        BaselineTable: Immutable table for the run.

    Raises:
        ConfigError: If the document is missing or malformed.
    """

    kind = PackageType(package_type)
    filename = f"{kind.value}.json"
    try:
        if baseline_dir is None:
            source = f"{DATA_PACKAGE}/{filename}"
            raw = resources.files(DATA_PACKAGE).joinpath(filename).read_text(encoding="utf-8")
        else:
            path = baseline_dir / filename
            source = str(path)
            raw = path.read_text(encoding="utf-8")
        payload = json.loads(raw)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Unable to load {kind.value} baseline: {exc}") from exc
    return BaselineTable(kind, MappingProxyType(_parse(payload, source=source)), source)


__all__ = ["BaselineTable", "load_baseline"]
