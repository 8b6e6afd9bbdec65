# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run the external tools pkgdeps depends on (find, tar, curl, extractors)."""

from __future__ import annotations

import shutil

# Bandit: every command is an argument list built from fixed tool names; no
# shell is involved.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Protocol

from .errors import ToolError

TIMEOUT_RETURNCODE = 124
NOT_FOUND_RETURNCODE = 127


class CommandRunner(Protocol):
    """Callable compatible with :func:`run_command`."""

    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
        capture_output: bool = False,
        text: bool = True,
        timeout: float | None = None,
        input: str | bytes | None = None,
    ) -> subprocess.CompletedProcess[Any]:
        """Execute ``args`` and return the completed process."""
        ...


def _as_text(value: str | bytes | None) -> str | None:
    if isinstance(value, bytes):
        return value.decode(errors="ignore")
    return value


def _locate(args: Sequence[str]) -> list[str]:
    """Return ``args`` with the executable replaced by its absolute path.

    Raises:
        ValueError: If ``args`` is empty.
        ToolError: If the executable is not on ``PATH``.
    """

    if not args:
        raise ValueError("a command needs at least the executable name")
    executable, *arguments = args
    if Path(executable).is_absolute():
        return [executable, *arguments]
    located = shutil.which(executable)
    if located is None:
        raise ToolError(list(args), NOT_FOUND_RETURNCODE, None, f"{executable} was not found on PATH")
    return [located, *arguments]


def _timed_out(
    command: list[str],
    exc: subprocess.TimeoutExpired,
    timeout: float | None,
) -> subprocess.CompletedProcess[Any]:
    note = "Command timed out" if timeout is None else f"Command timed out after {timeout:.1f}s"
    stderr = _as_text(exc.stderr)
    return subprocess.CompletedProcess(
        args=command,
        returncode=TIMEOUT_RETURNCODE,
        stdout=_as_text(exc.stdout) or "",
        stderr=f"{stderr}\n{note}" if stderr else note,
    )


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
    capture_output: bool = False,
    text: bool = True,
    timeout: float | None = None,
    input: str | bytes | None = None,  # noqa: A002 - mirrors subprocess.run
) -> subprocess.CompletedProcess[Any]:
    """Run a tool and return its completed process.

    Args:
        args: Command and arguments; the executable is resolved on ``PATH``.
        cwd: Optional working directory.
        env: Optional replacement environment.
        check: Raise :class:`ToolError` when the command exits non-zero.
        capture_output: Capture stdout and stderr.
        text: Decode output as text. Pass ``False`` when ``input`` is bytes.
        timeout: Optional timeout in seconds; expiry maps to return code 124.
        input: Data written to the child's stdin.

    Returns:
        subprocess.CompletedProcess: Completed process description.

    Raises:
        ToolError: If the executable cannot be found (return code 127), or
            ``check`` is true and the command exits non-zero.
    """

    command = _locate(args)
    try:
        completed: subprocess.CompletedProcess[Any] = subprocess.run(  # nosec B603
            command,
            cwd=None if cwd is None else str(cwd),
            env=None if env is None else dict(env),
            check=False,
            capture_output=capture_output,
            text=text,
            timeout=timeout,
            input=input,
        )
    except subprocess.TimeoutExpired as exc:
        completed = _timed_out(command, exc, timeout)

    if check and completed.returncode != 0:
        raise ToolError(
            command,
            completed.returncode,
            _as_text(completed.stdout),
            _as_text(completed.stderr),
        )
    return completed


__all__ = ["CommandRunner", "NOT_FOUND_RETURNCODE", "TIMEOUT_RETURNCODE", "run_command"]
