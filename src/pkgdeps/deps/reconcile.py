# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compute a package's shared-library dependencies and check them for drift.

The reconciler validates the architecture, gathers the application's binaries,
runs the extractor for the package type, filters out libraries the
application bundles itself and compares the sorted result, as an ordered
sequence, with the reviewed baseline. Strict mode turns drift into a
:class:`~pkgdeps.errors.DependencyDriftError`; permissive mode logs it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType
from typing import Protocol

from ..architectures import PackageType, validate_architecture
from ..config import Settings
from ..errors import DependencyDriftError
from ..process_utils import CommandRunner, run_command
from ..sysroot.models import SysrootKind
from ..sysroot.provisioner import SysrootProvisioner
from .baseline import BaselineTable, load_baseline
from .collect import collect_scan_targets
from .extractors import DependencyExtractor, DpkgShlibdepsExtractor, RpmFindRequiresExtractor
from .merge import DependencyDiff, filter_bundled, merge_package_deps

LOGGER = logging.getLogger(__name__)


class SysrootSource(Protocol):
    """Anything able to hand out a sysroot path by kind and architecture."""

    def acquire(self, kind: SysrootKind | str, arch: str) -> Path:
        """Return the local sysroot of ``kind`` for ``arch``."""
        ...


class DependencyReconciler:
    """Produce the sorted dependency list for a package and diff it against a baseline."""

    def __init__(
        self,
        settings: Settings,
        *,
        sysroots: SysrootSource | None = None,
        extractors: dict[PackageType, DependencyExtractor] | None = None,
        baselines: dict[PackageType, BaselineTable] | None = None,
        runner: CommandRunner = run_command,
    ) -> None:
        self._settings = settings
        self._sysroots = sysroots
        self._owned_provisioner: SysrootProvisioner | None = None
        self._runner = runner
        self._extractors = extractors or {
            PackageType.DEB: DpkgShlibdepsExtractor(runner=runner),
            PackageType.RPM: RpmFindRequiresExtractor(runner=runner),
        }
        self._baselines: dict[PackageType, BaselineTable] = dict(baselines or {})

    def _sysroot_source(self) -> SysrootSource:
        if self._sysroots is None:
            self._owned_provisioner = SysrootProvisioner(self._settings, runner=self._runner)
            self._sysroots = self._owned_provisioner
        return self._sysroots

    def __enter__(self) -> DependencyReconciler:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Release the sysroot provisioner this reconciler created, if any."""

        if self._owned_provisioner is not None:
            self._owned_provisioner.close()
            self._owned_provisioner = None
            self._sysroots = None

    def baseline(self, package_type: PackageType) -> BaselineTable:
        """Return the baseline table for ``package_type``, loading it once per run."""

        if package_type not in self._baselines:
            self._baselines[package_type] = load_baseline(package_type, self._settings.baseline_dir)
        return self._baselines[package_type]

    def compute(
        self,
        package_type: PackageType | str,
        build_dir: Path,
        application_name: str,
        arch: str,
    ) -> list[str]:
        """Return the filtered, sorted dependency list without consulting the baseline.

        Raises:
            InvalidArchitectureError: Before any I/O when ``arch`` is invalid.
        """

        return self._compute(package_type, build_dir, application_name, arch) or []

    def _compute(
        self,
        package_type: PackageType | str,
        build_dir: Path,
        application_name: str,
        arch: str,
    ) -> list[str] | None:
        arch_token = validate_architecture(package_type, arch)
        kind = PackageType(package_type)

        targets = collect_scan_targets(build_dir, application_name, self._settings, runner=self._runner)
        if targets is None:
            return None

        extractor = self._extractors[kind]
        if kind is PackageType.DEB:
            sysroots = self._sysroot_source()
            chromium_sysroot = sysroots.acquire(SysrootKind.CHROMIUM, arch_token.value)
            toolchain_sysroot = sysroots.acquire(SysrootKind.TOOLCHAIN, arch_token.value)
            module_deps = merge_package_deps(
                extractor.extract(targets.native_modules, arch_token.value, chromium_sysroot),
            )
            runtime_deps = merge_package_deps(
                extractor.extract(targets.runtime, arch_token.value, toolchain_sysroot),
            )
            merged = module_deps | runtime_deps
        else:
            merged = merge_package_deps(extractor.extract(targets.all_files))

        return sorted(filter_bundled(merged, self._settings.bundled_deps))

    def reconcile(
        self,
        package_type: PackageType | str,
        build_dir: Path,
        application_name: str,
        arch: str,
    ) -> list[str]:
        """Compute the dependency list and compare it with the reviewed baseline.

        Args:
            package_type: ``deb`` or ``rpm``.
            build_dir: Root of the built application.
            application_name: File name of the main executable.
            arch: Architecture token valid for ``package_type``.

        Returns:
            list[str]: Lexicographically sorted dependencies, returned whether or
            not they match the baseline in permissive mode.

        Raises:
            InvalidArchitectureError: If ``arch`` is invalid for ``package_type``.
            DependencyDriftError: In strict mode when the list differs from the baseline.
        """

        dependencies = self._compute(package_type, build_dir, application_name, arch)
        if dependencies is None:
            return []
        kind = PackageType(package_type)
        diff = DependencyDiff(self.baseline(kind).lookup(arch), tuple(dependencies))
        if diff.changed:
            message = diff.message()
            if self._settings.strict:
                raise DependencyDriftError(message, added=diff.added, removed=diff.removed)
            LOGGER.warning(message)
        return dependencies


def get_dependencies(
    package_type: PackageType | str,
    build_dir: Path,
    application_name: str,
    arch: str,
    *,
    settings: Settings,
    reconciler: DependencyReconciler | None = None,
) -> list[str]:
    """Convenience wrapper around :meth:`DependencyReconciler.reconcile`."""

    if reconciler is not None:
        return reconciler.reconcile(package_type, build_dir, application_name, arch)
    with DependencyReconciler(settings) as owned:
        return owned.reconcile(package_type, build_dir, application_name, arch)


__all__ = ["DependencyReconciler", "SysrootSource", "get_dependencies"]
