"""Core entrypoints: load a lockfile and decode every entry into a package.

This module holds no CLI concerns so it can be driven from the ``lockfetch``
command or imported directly.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import requests
from requests import Response
from tenacity import retry, stop_after_attempt, wait_fixed

from .config import OnError, Settings
from .errors import (
    DecodeError,
    DuplicatePackageError,
    EntryError,
    LockfileError,
    PrefetchError,
)
from .models import Package
from .parsers import bun_lock
from .parsers.entry import decode_package
from .prefetch import NixPrefetcher, Prefetcher

logger = logging.getLogger(__name__)

USER_AGENT = "lockfetch"


@dataclass(slots=True)
class DecodeReport:
    """Packages decoded from one lockfile, plus entries skipped on error."""

    packages: list[Package]
    skipped: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "packages": [package.to_dict() for package in self.packages],
            "skipped": list(self.skipped),
        }


# ---- Lockfile source resolution & download -------------------------------------------


@retry(reraise=True, stop=stop_after_attempt(3), wait=wait_fixed(2))
def _http_get(url: str, timeout: float) -> Response:
    return requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)


def fetch_lockfile(url: str, timeout: float = 30) -> str:
    """Return the raw lockfile text served at ``url``."""
    try:
        response = _http_get(url, timeout)
    except requests.RequestException as exc:
        raise LockfileError(f"Failed to fetch lockfile {url}: {exc}") from exc

    if response.status_code != 200:
        raise LockfileError(f"Unexpected status code {response.status_code} fetching {url}")

    return response.text


def load_lockfile(source: str | Path, timeout: float = 30) -> list[tuple[str, list[Any]]]:
    """Load lockfile entries from a filesystem path or an http(s) URL."""
    if isinstance(source, str) and source.startswith(("http://", "https://")):
        return bun_lock.loads(fetch_lockfile(source, timeout))
    return bun_lock.parse(Path(source))


# ---- Decoding ---------------------------------------------------------------------------


def decode_packages(
    entries: Iterable[tuple[str, list[Any]]],
    *,
    prefetch: Prefetcher,
    on_error: OnError = "abort",
) -> DecodeReport:
    """Decode entries one at a time, in order.

    The value lists are consumed. With ``on_error="abort"`` the first failure
    raises EntryError; with ``"skip"`` the entry is logged and left out.
    Packages are returned sorted by name. Identical packages collapse into
    one; a name claimed by two different fetchers is a DuplicatePackageError
    for the later entry.
    """
    if on_error not in ("abort", "skip"):
        raise ValueError(f"Invalid on_error policy: {on_error}")

    by_name: dict[str, Package] = {}
    skipped: list[str] = []

    for name, values in entries:
        try:
            package = decode_package(name, values, prefetch)
            existing = by_name.get(package.name)
            if existing is not None and existing != package:
                raise DuplicatePackageError(package.name)
        except (DecodeError, PrefetchError) as exc:
            if on_error == "abort":
                raise EntryError(name, exc) from exc
            logger.warning("Skipping package %s: %s", name, exc)
            skipped.append(name)
            continue

        by_name[package.name] = package

    packages = sorted(by_name.values(), key=lambda p: p.name)
    logger.info("Decoded %d packages, skipped %d", len(packages), len(skipped))
    return DecodeReport(packages=packages, skipped=skipped)


def generate(
    source: str | Path,
    *,
    settings: Settings | None = None,
    prefetch: Prefetcher | None = None,
) -> DecodeReport:
    """Load the lockfile at ``source`` and decode all of its packages.

    Params:
        source: path or URL of the lockfile
        settings: loaded configuration; defaults when None
        prefetch: hash prefetcher; a NixPrefetcher built from ``settings``
            when None
    """
    settings = settings or Settings()
    if prefetch is None:
        prefetch = NixPrefetcher.from_settings(settings)

    entries = load_lockfile(source, timeout=settings.http_timeout)
    logger.info("Loaded %d lockfile entries from %s", len(entries), source)
    return decode_packages(entries, prefetch=prefetch, on_error=settings.on_error)
