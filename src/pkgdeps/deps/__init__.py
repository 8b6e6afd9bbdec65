# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared-library dependency computation and drift detection."""

from __future__ import annotations

from .baseline import BaselineTable, load_baseline
from .collect import ScanTargets, collect_scan_targets
from .extractors import DependencyExtractor, DpkgShlibdepsExtractor, RpmFindRequiresExtractor
from .merge import DependencyDiff, filter_bundled, merge_package_deps
from .reconcile import DependencyReconciler, get_dependencies

__all__ = [
    "BaselineTable",
    "DependencyDiff",
    "DependencyExtractor",
    "DependencyReconciler",
    "DpkgShlibdepsExtractor",
    "RpmFindRequiresExtractor",
    "ScanTargets",
    "collect_scan_targets",
    "filter_bundled",
    "get_dependencies",
    "load_baseline",
    "merge_package_deps",
]
