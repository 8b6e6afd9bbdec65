# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and loaders for sysroot provisioning and dependency checks.

Settings are assembled exactly once, at the entry point, from built-in
defaults, the ``[tool.pkgdeps]`` table of the repository ``pyproject.toml``,
environment variables and explicit overrides (typically CLI flags). Core
components receive the resulting :class:`Settings` instance as a parameter and
never consult ``os.environ`` themselves.
"""

from __future__ import annotations

import os
import tempfile
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "pkgdeps"

ENV_SYSROOT_DIR: Final[str] = "PKGDEPS_SYSROOT_DIR"
ENV_TOKEN: Final[str] = "GITHUB_TOKEN"
ENV_STRICT: Final[str] = "PKGDEPS_STRICT"

# Based on chrome/installer/linux/BUILD.gn and the Linux archive build.
DEFAULT_BUNDLED_DEPS: Final[tuple[str, ...]] = (
    "libEGL.so",
    "libGLESv2.so",
    "libvulkan.so.1",
    "libvk_swiftshader.so",
    "libffmpeg.so",
)

_TRUE_TOKENS: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_TOKENS: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})
_PATH_FIELDS: Final[tuple[str, ...]] = (
    "sysroot_dir",
    "chromium_sysroot_root",
    "checksum_file",
    "version_pin_file",
    "baseline_dir",
)


class Settings(BaseModel):
    """Immutable configuration shared by the provisioner and the reconciler."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    repo_root: Path = Field(default_factory=Path.cwd)

    # Toolchain sysroot (hosted GitHub release).
    sysroot_dir: Path | None = None
    sysroot_prefix: str = "vscode"
    checksum_file: Path = Path("build/checksums/vscode-sysroot.txt")
    release_repository: str = "Microsoft/vscode-linux-build-agent"
    release_version: str = "20231122-245579"
    github_token: str | None = None
    user_agent: str = "VSCode Build"
    fetch_attempts: int = Field(default=10, ge=1)
    fetch_delay: float = Field(default=1.0, ge=0)
    fetch_timeout: float = Field(default=30.0, gt=0)

    # Chromium sysroot (Electron manifest + blob storage).
    chromium_sysroot_root: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))
    version_pin_file: Path = Path(".npmrc")
    manifest_url_template: str = (
        "https://raw.githubusercontent.com/electron/electron/v{version}/script/sysroots.json"
    )
    tarball_url_prefix: str = "https://msftelectron.blob.core.windows.net/sysroots/toolchain"
    download_attempts: int = Field(default=3, ge=1)

    # Dependency reconciliation.
    strict: bool = True
    allow_empty_scan: bool = False
    baseline_dir: Path | None = None
    bundled_deps: tuple[str, ...] = DEFAULT_BUNDLED_DEPS
    native_modules_subdir: Path = Path("resources/app/node_modules.asar.unpacked")
    native_module_pattern: str = "*.node"
    tunnel_application_name: str = "code-tunnel"
    sandbox_name: str = "chrome-sandbox"
    crash_handler_name: str = "chrome_crashpad_handler"

    def resolve(self, path: Path) -> Path:
        """Return ``path`` anchored at :attr:`repo_root` when it is relative.

        Args:
            path: Absolute or repository-relative path.

        Returns:
            Path: Absolute path.
        """

        expanded = path.expanduser()
        return expanded if expanded.is_absolute() else self.repo_root / expanded

    def toolchain_cache_dir(self, arch: str) -> Path:
        """Return the cache directory for the toolchain sysroot of ``arch``."""

        if self.sysroot_dir is not None:
            return self.resolve(self.sysroot_dir)
        return Path(tempfile.gettempdir()) / f"{self.sysroot_prefix}-{arch}-sysroot"


def _parse_bool(raw: str, *, name: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_TOKENS:
        return True
    if lowered in _FALSE_TOKENS:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _load_pyproject_section(root: Path) -> dict[str, Any]:
    """Return the ``[tool.pkgdeps]`` table from ``root/pyproject.toml``.

    Args:
        root: Repository root containing the optional ``pyproject.toml``.

    Returns:
        dict[str, Any]: Section contents, empty when the file or table is absent.
    """

    pyproject = root / PYPROJECT_FILENAME
    if not pyproject.is_file():
        return {}
    try:
        with pyproject.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Unable to read {pyproject}: {exc}") from exc
    tool_section = data.get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return {}
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ConfigError(f"[tool.{PYPROJECT_SECTION_KEY}] in {pyproject} must be a table")
    return {key.replace("-", "_"): value for key, value in section.items()}


def _environment_fragment(env: Mapping[str, str]) -> dict[str, Any]:
    fragment: dict[str, Any] = {}
    if sysroot_dir := env.get(ENV_SYSROOT_DIR):
        fragment["sysroot_dir"] = Path(sysroot_dir)
    if token := env.get(ENV_TOKEN):
        fragment["github_token"] = token
    if (strict := env.get(ENV_STRICT)) is not None and strict.strip():
        fragment["strict"] = _parse_bool(strict, name=ENV_STRICT)
    return fragment


def load_settings(
    root: Path,
    *,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Build :class:`Settings` for the repository at ``root``.

    Later sources win: defaults, ``[tool.pkgdeps]``, environment, ``overrides``.
    ``None`` values in ``overrides`` are ignored so CLI options can be passed
    through unconditionally.

    Args:
        root: Repository root used to resolve relative paths.
        env: Environment mapping; defaults to :data:`os.environ`.
        overrides: Explicit values, usually collected from the command line.

    Returns:
        Settings: Validated configuration.

    Raises:
        ConfigError: If any source contains invalid values.
    """

    resolved_root = root.resolve()
    payload: dict[str, Any] = {"repo_root": resolved_root}
    payload.update(_load_pyproject_section(resolved_root))
    payload.update(_environment_fragment(os.environ if env is None else env))
    if overrides:
        payload.update({key: value for key, value in overrides.items() if value is not None})
    try:
        settings = Settings.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid pkgdeps configuration: {exc}") from exc
    updates = {
        name: settings.resolve(value)
        for name in _PATH_FIELDS
        if isinstance(value := getattr(settings, name), Path)
    }
    return settings.model_copy(update=updates)


__all__ = [
    "DEFAULT_BUNDLED_DEPS",
    "ENV_STRICT",
    "ENV_SYSROOT_DIR",
    "ENV_TOKEN",
    "Settings",
    "load_settings",
]
