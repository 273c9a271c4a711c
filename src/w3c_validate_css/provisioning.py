# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate, download and cache the CSS validator engine archive."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Protocol

import requests

from .constants import (
    DEFAULT_CACHE_DIR,
    DEFAULT_DOWNLOAD_TIMEOUT,
    DOWNLOAD_CHUNK_SIZE,
    DOWNLOAD_USER_AGENT,
    ENGINE_FILENAME,
    ENGINE_SOURCES,
    JAVA_EXECUTABLE,
    PARTIAL_SUFFIX,
    ZIP_SIGNATURE,
)
from .errors import HostUnavailableError, ProvisioningError
from .process import run_command

LOGGER = logging.getLogger(__name__)


class Provisioner(Protocol):
    """Anything able to hand out a path to a usable engine archive."""

    def resolve(self) -> Path:
        """Return the path of a verified engine archive."""
        raise NotImplementedError


def java_available(java: str = JAVA_EXECUTABLE) -> bool:
    """Return ``True`` when the Java runtime needed by the engine is present.

    ``java -version`` writes to stderr and some distributions exit non-zero, so
    either a clean exit or any captured output counts as present.

    Args:
        java: Executable name or absolute path of the Java launcher.

    Returns:
        bool: ``True`` when the runtime could be spawned.
    """

    try:
        completed = run_command([java, "-version"])
    except OSError as exc:
        LOGGER.debug("java check failed: %s", exc)
        return False
    return completed.returncode == 0 or bool(completed.stdout or completed.stderr)


def ensure_java(java: str = JAVA_EXECUTABLE) -> None:
    """Raise :class:`HostUnavailableError` when :func:`java_available` fails."""

    if not java_available(java):
        raise HostUnavailableError("java not found")


def is_zip_archive(path: Path) -> bool:
    """Return ``True`` when ``path`` starts with the ZIP local file header magic.

    This is a structural sanity check only; it says nothing about authenticity.
    """

    try:
        with path.open("rb") as handle:
            return handle.read(len(ZIP_SIGNATURE)) == ZIP_SIGNATURE
    except OSError:
        return False


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        LOGGER.debug("could not remove %s: %s", path, exc)


def download(
    url: str,
    destination: Path,
    *,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
) -> None:
    """Stream ``url`` into ``destination``, installing it only once complete.

    The body is written to a ``.part`` sibling and moved into place with
    :func:`os.replace`, so an interrupted transfer never leaves a truncated
    archive at ``destination``.

    Args:
        url: Source URL; redirects are followed.
        destination: Final location of the downloaded file.
        session: Optional :class:`requests.Session` used for the transfer.
        timeout: Connect/read timeout in seconds.

    Raises:
        requests.RequestException: On network errors or non-2xx responses.
        OSError: When the file cannot be written or moved into place.
    """

    http = session or requests
    partial = destination.with_name(destination.name + PARTIAL_SUFFIX)
    try:
        with http.get(
            url,
            headers={"User-Agent": DOWNLOAD_USER_AGENT},
            allow_redirects=True,
            stream=True,
            timeout=timeout,
        ) as response:
            response.raise_for_status()
            with partial.open("wb") as handle:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        handle.write(chunk)
        os.replace(partial, destination)
    except BaseException:
        _discard(partial)
        raise


class EngineProvisioner:
    """Resolve the engine archive from a fixed cache location, downloading it when needed.

    The resolved path is memoized for the lifetime of the instance, so a
    process normally shares one provisioner (see :func:`default_provisioner`)
    and resolution happens at most once per process.
    """

    def __init__(
        self,
        *,
        cache_dir: Path = DEFAULT_CACHE_DIR,
        sources: Sequence[str] = ENGINE_SOURCES,
        timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._cache_dir = cache_dir
        self._sources = tuple(sources)
        self._timeout = timeout
        self._session = session
        self._lock = Lock()
        self._resolved: Path | None = None

    @property
    def cache_path(self) -> Path:
        """Location of the cached engine archive."""
        return self._cache_dir / ENGINE_FILENAME

    def resolve(self) -> Path:
        """Return the path of a verified engine archive.

        Returns:
            Path: Cached archive that passed :func:`is_zip_archive`.

        Raises:
            ProvisioningError: If the cache is unusable and every source failed.
        """

        with self._lock:
            if self._resolved is None:
                self._resolved = self._provision()
            return self._resolved

    def _provision(self) -> Path:
        target = self.cache_path
        if target.exists() and is_zip_archive(target):
            LOGGER.debug("using cached engine at %s", target)
            return target

        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ProvisioningError(f"cannot create cache directory {self._cache_dir}: {exc}") from exc
        _discard(target)

        for url in self._sources:
            LOGGER.debug("downloading engine from %s", url)
            try:
                download(url, target, session=self._session, timeout=self._timeout)
            except (requests.RequestException, OSError) as exc:
                LOGGER.debug("download from %s failed: %s", url, exc)
                _discard(target)
                continue
            if is_zip_archive(target):
                LOGGER.debug("installed engine from %s", url)
                return target
            LOGGER.debug("download from %s is not a ZIP archive", url)
            _discard(target)

        raise ProvisioningError(f"failed to obtain {ENGINE_FILENAME}")


@lru_cache(maxsize=1)
def default_provisioner() -> EngineProvisioner:
    """Return the process-wide :class:`EngineProvisioner` using default settings."""

    return EngineProvisioner()


__all__ = [
    "EngineProvisioner",
    "Provisioner",
    "default_provisioner",
    "download",
    "ensure_java",
    "is_zip_archive",
    "java_available",
]
