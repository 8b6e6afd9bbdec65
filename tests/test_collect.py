# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for scan-target enumeration."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

import pytest

from pkgdeps.config import Settings
from pkgdeps.deps.collect import collect_scan_targets
from pkgdeps.errors import ToolError
from tests.fakes import RecordedCall, RecordingRunner


def _find_fails(call: RecordedCall) -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(list(call.args), 1, stdout="", stderr="find: No such file or directory")


def test_collects_native_modules_and_runtime_files(
    tmp_path: Path,
    settings: Settings,
    runner: RecordingRunner,
) -> None:
    build = tmp_path / "VSCode-linux-x64"
    modules = build / "resources" / "app" / "node_modules.asar.unpacked"
    runner.on("find", lambda call: f"{modules}/spdlog/build/Release/spdlog.node\n{modules}/pty/pty.node\n")

    targets = collect_scan_targets(build, "code", settings, runner=runner)

    assert targets is not None
    assert targets.native_modules == (
        modules / "spdlog" / "build" / "Release" / "spdlog.node",
        modules / "pty" / "pty.node",
        build / "bin" / "code-tunnel",
    )
    assert targets.runtime == (build / "code", build / "chrome-sandbox", build / "chrome_crashpad_handler")
    assert targets.all_files[-1] == build / "chrome_crashpad_handler"
    (call,) = runner.calls
    assert call.args == ("find", str(modules), "-name", "*.node")


def test_enumeration_failure_propagates_by_default(
    tmp_path: Path,
    settings: Settings,
    runner: RecordingRunner,
) -> None:
    runner.on("find", _find_fails)

    with pytest.raises(ToolError):
        collect_scan_targets(tmp_path, "code", settings, runner=runner)


def test_enumeration_failure_can_degrade_to_empty_scan(
    tmp_path: Path,
    settings: Settings,
    runner: RecordingRunner,
    caplog: pytest.LogCaptureFixture,
) -> None:
    runner.on("find", _find_fails)
    lenient = settings.model_copy(update={"allow_empty_scan": True})

    with caplog.at_level(logging.ERROR, logger="pkgdeps"):
        assert collect_scan_targets(tmp_path, "code", lenient, runner=runner) is None

    assert "Error finding files" in caplog.text
