# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the toolchain sysroot installer."""

from __future__ import annotations

import hashlib
import subprocess
from pathlib import Path

import pytest

from pkgdeps.architectures import DebianArch
from pkgdeps.config import Settings
from pkgdeps.errors import ConfigError, IntegrityError, InvalidArchitectureError, MissingChecksumError, ToolError
from pkgdeps.sysroot import SysrootKind, SysrootProvisioner
from pkgdeps.sysroot.toolchain import archive_for
from tests.fakes import FakeResponse, FakeSession, RecordedCall, RecordingRunner

RELEASE_URL = "https://api.github.com/repos/Microsoft/vscode-linux-build-agent/releases/tags/v20231122-245579"
ASSET_URL = "https://api.github.com/repos/Microsoft/vscode-linux-build-agent/releases/assets/7"
PAYLOAD = b"x86_64 toolchain"


def _write_checksums(settings: Settings, entries: dict[str, str]) -> None:
    settings.checksum_file.parent.mkdir(parents=True, exist_ok=True)
    settings.checksum_file.write_text(
        "".join(f"{checksum} {name}\n" for name, checksum in entries.items()),
        encoding="utf-8",
    )


def _fake_tar(call: RecordedCall) -> str:
    target = Path(call.args[call.args.index("-C") + 1])
    sysroot = target / "x86_64-linux-gnu" / "x86_64-linux-gnu" / "sysroot"
    sysroot.mkdir(parents=True)
    (sysroot / "marker").write_text("extracted", encoding="utf-8")
    return ""


@pytest.fixture
def provisioner(settings: Settings, session: FakeSession, runner: RecordingRunner) -> SysrootProvisioner:
    _write_checksums(settings, {"x86_64-linux-gnu.tar.gz": hashlib.sha256(PAYLOAD).hexdigest()})
    session.route(RELEASE_URL, FakeResponse(json_data={"assets": [{"name": "x86_64-linux-gnu.tar.gz", "url": ASSET_URL}]}))
    session.route(ASSET_URL, FakeResponse(content=PAYLOAD))
    runner.on("tar", _fake_tar)
    return SysrootProvisioner(settings, session=session, runner=runner)  # type: ignore[arg-type]


def test_archive_names_per_arch() -> None:
    assert archive_for(DebianArch.AMD64) == ("x86_64-linux-gnu.tar.gz", "x86_64-linux-gnu")
    assert archive_for(DebianArch.ARMHF) == ("arm-rpi-linux-gnueabihf.tar.gz", "arm-rpi-linux-gnueabihf")


def test_acquire_installs_and_stamps(
    provisioner: SysrootProvisioner,
    settings: Settings,
    runner: RecordingRunner,
) -> None:
    result = provisioner.acquire(SysrootKind.TOOLCHAIN, "amd64")

    cache = settings.sysroot_dir
    assert cache is not None
    assert result == cache / "x86_64-linux-gnu" / "x86_64-linux-gnu" / "sysroot"
    assert (result / "marker").is_file()
    assert (cache / ".stamp").read_text(encoding="utf-8") == "x86_64-linux-gnu.tar.gz"
    (tar_call,) = runner.named("tar")
    assert tar_call.args == ("tar", "-xz", "-C", str(cache))
    assert tar_call.input == PAYLOAD


def test_second_acquire_is_served_from_cache(
    provisioner: SysrootProvisioner,
    session: FakeSession,
    runner: RecordingRunner,
) -> None:
    first = provisioner.acquire("toolchain", "amd64")
    requests_made = len(session.calls)
    commands_run = len(runner.calls)

    second = provisioner.acquire("toolchain", "amd64")

    assert second == first
    assert len(session.calls) == requests_made
    assert len(runner.calls) == commands_run


def test_stale_stamp_wipes_previous_install(provisioner: SysrootProvisioner, settings: Settings) -> None:
    cache = settings.sysroot_dir
    assert cache is not None
    cache.mkdir(parents=True)
    (cache / ".stamp").write_text("x86_64-linux-gnu-old.tar.gz", encoding="utf-8")
    (cache / "leftover.txt").write_text("stale", encoding="utf-8")

    provisioner.acquire(SysrootKind.TOOLCHAIN, "amd64")

    assert not (cache / "leftover.txt").exists()
    assert (cache / ".stamp").read_text(encoding="utf-8") == "x86_64-linux-gnu.tar.gz"


def test_missing_checksum_entry_fails_before_download(
    provisioner: SysrootProvisioner,
    session: FakeSession,
) -> None:
    with pytest.raises(MissingChecksumError, match="Could not find checksum for arm-rpi-linux-gnueabihf.tar.gz"):
        provisioner.acquire(SysrootKind.TOOLCHAIN, "armhf")

    assert session.calls == []


def test_unreadable_checksum_table(settings: Settings, session: FakeSession, runner: RecordingRunner) -> None:
    provisioner = SysrootProvisioner(settings, session=session, runner=runner)  # type: ignore[arg-type]

    with pytest.raises(ConfigError, match="checksum table"):
        provisioner.acquire(SysrootKind.TOOLCHAIN, "arm64")


def test_non_debian_arch_is_rejected(provisioner: SysrootProvisioner) -> None:
    with pytest.raises(InvalidArchitectureError, match="Invalid Debian arch string x86_64"):
        provisioner.acquire(SysrootKind.TOOLCHAIN, "x86_64")


def test_checksum_mismatch_leaves_no_stamp(
    provisioner: SysrootProvisioner,
    settings: Settings,
    session: FakeSession,
    runner: RecordingRunner,
) -> None:
    session.route(ASSET_URL, FakeResponse(content=b"tampered"))

    with pytest.raises(IntegrityError):
        provisioner.acquire(SysrootKind.TOOLCHAIN, "amd64")

    cache = settings.sysroot_dir
    assert cache is not None
    assert not (cache / ".stamp").exists()
    assert runner.named("tar") == []


def test_failed_extraction_leaves_no_stamp(
    provisioner: SysrootProvisioner,
    settings: Settings,
    session: FakeSession,
    runner: RecordingRunner,
) -> None:
    runner.on(
        "tar",
        lambda call: subprocess.CompletedProcess(list(call.args), 2, stdout="", stderr="gzip: stdin: not in gzip format"),
    )

    with pytest.raises(ToolError) as excinfo:
        provisioner.acquire(SysrootKind.TOOLCHAIN, "amd64")

    assert excinfo.value.returncode == 2
    cache = settings.sysroot_dir
    assert cache is not None
    assert not (cache / ".stamp").exists()

    runner.on("tar", _fake_tar)
    provisioner.acquire(SysrootKind.TOOLCHAIN, "amd64")

    assert len(runner.named("tar")) == 2
    assert (cache / ".stamp").read_text(encoding="utf-8") == "x86_64-linux-gnu.tar.gz"
