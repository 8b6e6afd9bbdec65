# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from pkgdeps.config import Settings, load_settings
from tests.fakes import ELECTRON_VERSION, FakeSession, RecordingRunner


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Return a repository root holding an Electron version pin."""

    root = tmp_path / "repo"
    root.mkdir()
    (root / ".npmrc").write_text(
        f'disturl "https://electronjs.org/headers"\ntarget "{ELECTRON_VERSION}"\nms_build_id "1234"\n',
        encoding="utf-8",
    )
    return root


@pytest.fixture
def settings(repo_root: Path, tmp_path: Path) -> Settings:
    return load_settings(
        repo_root,
        env={},
        overrides={
            "sysroot_dir": tmp_path / "toolchain",
            "chromium_sysroot_root": tmp_path / "chromium",
            "fetch_delay": 0,
        },
    )
