# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the Electron-pinned Chromium sysroot installer."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path

import pytest
import requests

from pkgdeps.architectures import DebianArch
from pkgdeps.config import Settings
from pkgdeps.errors import ConfigError, IntegrityError, ManifestError, TransportError
from pkgdeps.sysroot import SysrootKind, SysrootProvisioner
from pkgdeps.sysroot.chromium import manifest_key, parse_manifest_entry, read_electron_version
from tests.fakes import ELECTRON_VERSION, FakeResponse, FakeSession, RecordedCall, RecordingRunner

TARBALL = "debian_bullseye_amd64_sysroot.tar.xz"
TARBALL_BYTES = b"pretend this is xz data" * 64
TARBALL_SHA1 = hashlib.sha1(TARBALL_BYTES).hexdigest()
TARBALL_URL = f"https://msftelectron.blob.core.windows.net/sysroots/toolchain/{TARBALL_SHA1}/{TARBALL}"
MANIFEST = {
    "bullseye_amd64": {
        "Tarball": TARBALL,
        "Sha1Sum": TARBALL_SHA1,
        "SysrootDir": "debian_bullseye_amd64-sysroot",
    },
    "bullseye_arm": {
        "Tarball": "debian_bullseye_arm_sysroot.tar.xz",
        "Sha1Sum": "0" * 40,
        "SysrootDir": "debian_bullseye_arm-sysroot",
    },
}


def _fake_curl(call: RecordedCall) -> str:
    Path(call.args[call.args.index("-o") + 1]).write_text(json.dumps(MANIFEST), encoding="utf-8")
    return ""


def _fake_tar(call: RecordedCall) -> str:
    target = Path(call.args[call.args.index("-C") + 1])
    (target / "usr" / "lib").mkdir(parents=True)
    return ""


@pytest.fixture
def provisioner(settings: Settings, session: FakeSession, runner: RecordingRunner) -> SysrootProvisioner:
    runner.on("curl", _fake_curl)
    runner.on("tar", _fake_tar)
    return SysrootProvisioner(settings, session=session, runner=runner)  # type: ignore[arg-type]


def test_read_electron_version(repo_root: Path) -> None:
    pin = read_electron_version(repo_root / ".npmrc")

    assert pin.version == ELECTRON_VERSION
    assert pin.build_id == "1234"


def test_missing_version_pin_is_a_config_error(tmp_path: Path) -> None:
    pin_file = tmp_path / ".npmrc"
    pin_file.write_text('runtime "electron"\n', encoding="utf-8")

    with pytest.raises(ConfigError, match="No target version"):
        read_electron_version(pin_file)


def test_manifest_keys() -> None:
    assert manifest_key(DebianArch.AMD64) == "bullseye_amd64"
    assert manifest_key(DebianArch.ARM64) == "bullseye_arm64"
    assert manifest_key(DebianArch.ARMHF) == "bullseye_arm"


def test_manifest_without_arch_entry() -> None:
    with pytest.raises(ManifestError, match="bullseye_arm64"):
        parse_manifest_entry(MANIFEST, DebianArch.ARM64)


def test_acquire_downloads_verifies_and_extracts(
    provisioner: SysrootProvisioner,
    settings: Settings,
    session: FakeSession,
    runner: RecordingRunner,
) -> None:
    session.route(TARBALL_URL, FakeResponse(content=TARBALL_BYTES))

    result = provisioner.acquire(SysrootKind.CHROMIUM, "amd64")

    assert result == settings.chromium_sysroot_root / "debian_bullseye_amd64-sysroot"
    assert (result / "usr" / "lib").is_dir()
    assert not (result / TARBALL).exists()
    assert (result / ".stamp").read_text(encoding="utf-8") == TARBALL_URL
    (curl_call,) = runner.named("curl")
    assert (
        f"https://raw.githubusercontent.com/electron/electron/v{ELECTRON_VERSION}/script/sysroots.json"
        in curl_call.args
    )
    assert "Authorization" not in " ".join(curl_call.args)
    (tar_call,) = runner.named("tar")
    assert tar_call.args[:3] == ("tar", "xf", str(result / TARBALL))
    (url, kwargs) = session.calls[0]
    assert url == TARBALL_URL
    assert kwargs["stream"] is True


def test_current_stamp_skips_download(
    provisioner: SysrootProvisioner,
    session: FakeSession,
    runner: RecordingRunner,
) -> None:
    session.route(TARBALL_URL, FakeResponse(content=TARBALL_BYTES))
    provisioner.acquire(SysrootKind.CHROMIUM, "amd64")

    provisioner.acquire(SysrootKind.CHROMIUM, "amd64")

    assert len(session.calls) == 1
    assert len(runner.named("tar")) == 1
    assert len(runner.named("curl")) == 2


def test_sha1_mismatch_leaves_no_stamp(
    provisioner: SysrootProvisioner,
    settings: Settings,
    session: FakeSession,
) -> None:
    session.route(TARBALL_URL, FakeResponse(content=b"corrupted"))

    with pytest.raises(IntegrityError, match=TARBALL):
        provisioner.acquire(SysrootKind.CHROMIUM, "amd64")

    assert not (settings.chromium_sysroot_root / "debian_bullseye_amd64-sysroot" / ".stamp").exists()


def test_download_gives_up_after_three_attempts(
    provisioner: SysrootProvisioner,
    settings: Settings,
    session: FakeSession,
    runner: RecordingRunner,
) -> None:
    session.route(TARBALL_URL, requests.ConnectionError("reset by peer"))

    with pytest.raises(TransportError, match="Failed to download"):
        provisioner.acquire(SysrootKind.CHROMIUM, "amd64")

    assert len(session.calls) == 3
    assert not (settings.chromium_sysroot_root / "debian_bullseye_amd64-sysroot" / TARBALL).exists()
    assert runner.named("tar") == []


def test_http_error_status_counts_as_failed_attempt(
    provisioner: SysrootProvisioner,
    session: FakeSession,
) -> None:
    session.route(TARBALL_URL, FakeResponse(status_code=503), FakeResponse(content=TARBALL_BYTES))

    provisioner.acquire(SysrootKind.CHROMIUM, "amd64")

    assert len(session.calls) == 2


def test_token_is_forwarded_to_curl(settings: Settings, session: FakeSession, runner: RecordingRunner) -> None:
    runner.on("curl", _fake_curl)
    runner.on("tar", _fake_tar)
    session.route(TARBALL_URL, FakeResponse(content=TARBALL_BYTES))
    authed = settings.model_copy(update={"github_token": "ghs_token"})

    SysrootProvisioner(authed, session=session, runner=runner).acquire("chromium", "amd64")  # type: ignore[arg-type]

    (curl_call,) = runner.named("curl")
    assert curl_call.args[1:3] == ("-H", "Authorization: Bearer ghs_token")
