# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Merge, filter and diff dependency lists."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass


def merge_package_deps(dependency_sets: Iterable[Iterable[str]]) -> set[str]:
    """Flatten extractor output into one set of trimmed requirements.

    Blank entries and ``#`` comments are dropped.
    """

    requires: set[str] = set()
    for dependency_set in dependency_sets:
        for dependency in dependency_set:
            trimmed = dependency.strip()
            if trimmed and not trimmed.startswith("#"):
                requires.add(trimmed)
    return requires


def filter_bundled(dependencies: Iterable[str], bundled: Sequence[str]) -> list[str]:
    """Return ``dependencies`` minus entries that start with a bundled library name.

    Matching is by prefix: ``libfoo.so`` removes ``libfoo.so.2`` but not
    ``notlibfoo.so``.
    """

    prefixes = tuple(bundled)
    return [dependency for dependency in dependencies if not (prefixes and dependency.startswith(prefixes))]


@dataclass(frozen=True, slots=True)
class DependencyDiff:
    """Ordered comparison between a baseline and a freshly computed list."""

    baseline: tuple[str, ...]
    computed: tuple[str, ...]

    @property
    def changed(self) -> bool:
        """Return ``True`` when the sequences differ, including by order only."""

        return self.baseline != self.computed

    @property
    def added(self) -> tuple[str, ...]:
        """Entries present in the computed list but not in the baseline."""

        known = set(self.baseline)
        return tuple(entry for entry in self.computed if entry not in known)

    @property
    def removed(self) -> tuple[str, ...]:
        """Entries present in the baseline but no longer computed."""

        current = set(self.computed)
        return tuple(entry for entry in self.baseline if entry not in current)

    def message(self) -> str:
        """Render the drift report shown to release engineers."""

        lines = ["The dependencies list has changed.", "Old:", *self.baseline, "New:", *self.computed]
        if self.added:
            lines.extend(["Added:", *self.added])
        if self.removed:
            lines.extend(["Removed:", *self.removed])
        if not self.added and not self.removed:
            lines.append("Entries are identical but their order differs.")
        return "\n".join(lines)


__all__ = ["DependencyDiff", "filter_bundled", "merge_package_deps"]
