# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fetch release assets from GitHub with bounded fixed-delay retries."""

from __future__ import annotations

import json
import logging
import threading
import time
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import Any, Final

import requests

from ..errors import IntegrityError, TransportError
from ..hashing import bytes_digest

LOGGER = logging.getLogger(__name__)

GITHUB_API: Final[str] = "https://api.github.com"
API_ACCEPT: Final[str] = "application/vnd.github.v3+json"
DOWNLOAD_ACCEPT: Final[str] = "application/octet-stream"
STREAM_CHUNK_SIZE: Final[int] = 64 * 1024


class AssetLookupError(Exception):
    """Raised inside a single attempt when the release lacks the asset."""


@dataclass(frozen=True, slots=True)
class _AttemptWindow:
    """Wall-clock budget shared by the requests of one attempt."""

    deadline: float
    cancelled: threading.Event

    def remaining(self, url: str) -> float:
        left = self.deadline - time.monotonic()
        if left <= 0 or self.cancelled.is_set():
            raise requests.Timeout(f"Request {url} ran past the attempt deadline")
        return left


@dataclass(slots=True)
class ReleaseAssetFetcher:
    """Download named assets from one tagged GitHub release.

    Each attempt (release lookup plus asset download) is limited to
    ``timeout`` seconds of wall-clock time; an attempt still running at the
    deadline is abandoned and counts as failed. Transport failures, non-2xx
    responses, a missing asset and expired attempts are retried up to
    ``attempts`` times with a fixed ``delay``; a checksum mismatch fails
    immediately.
    """

    repository: str
    version: str
    session: requests.Session
    token: str | None = None
    user_agent: str = "VSCode Build"
    attempts: int = 10
    delay: float = 1.0
    timeout: float = 30.0
    sleep: Callable[[float], None] = field(default=time.sleep)

    @property
    def release_url(self) -> str:
        """Return the API URL of the pinned release."""

        return f"{GITHUB_API}/repos/{self.repository}/releases/tags/v{self.version}"

    def _headers(self, accept: str) -> dict[str, str]:
        headers = {"Accept": accept, "User-Agent": self.user_agent}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def fetch(self, asset_name: str, *, sha256: str) -> bytes:
        """Return the verified bytes of ``asset_name``.

        Args:
            asset_name: Asset file name inside the release.
            sha256: Expected hex digest of the asset.

        Returns:
            bytes: Downloaded asset content.

        Raises:
            IntegrityError: If the downloaded content does not match ``sha256``.
            TransportError: If every attempt failed to download the asset.
        """

        last_error: Exception | None = None
        for attempt in range(1, self.attempts + 1):
            try:
                return self._attempt(asset_name, sha256=sha256)
            except (requests.RequestException, AssetLookupError, ValueError) as exc:
                last_error = exc
                LOGGER.info("Fetching failed (attempt %d/%d): %s", attempt, self.attempts, exc)
                if attempt < self.attempts:
                    self.sleep(self.delay)
        raise TransportError(
            f"Unable to fetch {asset_name} from {self.repository} @ {self.version} "
            f"after {self.attempts} attempts: {last_error}",
        ) from last_error

    def _attempt(self, asset_name: str, *, sha256: str) -> bytes:
        """Run one attempt on a worker thread and stop waiting at the deadline.

        A read blocked on a slow server cannot be interrupted, so the worker is
        told to give up at its next chunk and left to finish in the background.
        """

        window = _AttemptWindow(time.monotonic() + self.timeout, threading.Event())
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pkgdeps-fetch")
        try:
            future = executor.submit(self._fetch_once, asset_name, sha256, window)
            try:
                return future.result(timeout=self.timeout)
            except FutureTimeoutError as exc:
                window.cancelled.set()
                raise requests.Timeout(
                    f"Fetching {asset_name} did not finish within {self.timeout:g}s",
                ) from exc
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _fetch_once(self, asset_name: str, sha256: str, window: _AttemptWindow) -> bytes:
        body = self._read(self.release_url, API_ACCEPT, window)
        asset = _find_asset(json.loads(body), asset_name)
        if asset is None or not asset.get("url"):
            raise AssetLookupError(
                f"Could not find asset {asset_name} in release of {self.repository} @ {self.version}",
            )
        asset_url = str(asset["url"])
        LOGGER.info("Found asset %s @ %s.", asset_name, asset_url)

        content = self._read(asset_url, DOWNLOAD_ACCEPT, window)
        LOGGER.info("Fetched response body buffer: %d bytes", len(content))

        actual = bytes_digest(content, "sha256")
        if actual != sha256:
            raise IntegrityError(asset_url, expected=sha256, actual=actual)
        LOGGER.info("Verified SHA256 checksums match for %s", asset_url)
        return content

    def _read(self, url: str, accept: str, window: _AttemptWindow) -> bytes:
        """Stream ``url`` into memory, checking the attempt deadline per chunk."""

        with self.session.get(
            url,
            headers=self._headers(accept),
            timeout=window.remaining(url),
            stream=True,
        ) as response:
            _ensure_success(response, url)
            LOGGER.info("Fetch completed: Status %s.", response.status_code)
            chunks: list[bytes] = []
            for chunk in response.iter_content(chunk_size=STREAM_CHUNK_SIZE):
                window.remaining(url)
                chunks.append(chunk)
        return b"".join(chunks)


def _ensure_success(response: requests.Response, url: str) -> None:
    if not 200 <= response.status_code < 300:
        raise requests.HTTPError(
            f"Request {url} failed with status code: {response.status_code}",
            response=response,
        )


def _find_asset(payload: Any, asset_name: str) -> Mapping[str, Any] | None:
    assets = payload.get("assets") if isinstance(payload, Mapping) else None
    if not isinstance(assets, list):
        return None
    for asset in assets:
        if isinstance(asset, Mapping) and asset.get("name") == asset_name:
            return asset
    return None


__all__ = ["AssetLookupError", "ReleaseAssetFetcher"]
