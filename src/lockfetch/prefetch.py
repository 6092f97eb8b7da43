"""Content-hash prefetching for fetchers the lockfile cannot pin itself.

Git, GitHub and remote tarball entries carry no integrity hash in the
lockfile, so one is computed ahead of time by asking nix to fetch the
locator and report the resulting hash.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from .errors import PrefetchError

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger(__name__)

DEFAULT_PREFETCH_COMMAND = ("nix", "flake", "prefetch", "--json")


@dataclass(frozen=True, slots=True)
class PrefetchResult:
    hash: str

    def __post_init__(self) -> None:
        if not self.hash:
            raise PrefetchError("Prefetch returned an empty hash")


Prefetcher: TypeAlias = Callable[[str], PrefetchResult]


def parse_prefetch_output(stdout: str, locator: str) -> PrefetchResult:
    """Extract the hash from ``nix flake prefetch --json`` output."""
    try:
        payload = json.loads(stdout)
    except json.JSONDecodeError as exc:
        raise PrefetchError(f"Invalid prefetch output for {locator}: {exc.msg}") from exc

    if not isinstance(payload, dict):
        raise PrefetchError(f"Prefetch output for {locator} is not a JSON object")

    content_hash = payload.get("hash")
    if not isinstance(content_hash, str) or not content_hash:
        raise PrefetchError(f"Prefetch output for {locator} has no 'hash' field")

    return PrefetchResult(hash=content_hash)


@dataclass(slots=True)
class NixPrefetcher:
    """Prefetcher shelling out to nix, retrying failed runs."""

    command: tuple[str, ...] = DEFAULT_PREFETCH_COMMAND
    attempts: int = 3
    wait_seconds: float = 2

    @classmethod
    def from_settings(cls, settings: Settings) -> NixPrefetcher:
        return cls(
            command=settings.prefetch_command,
            attempts=settings.prefetch_attempts,
            wait_seconds=settings.prefetch_wait_seconds,
        )

    def __call__(self, locator: str) -> PrefetchResult:
        binary = self.command[0]
        if shutil.which(binary) is None:
            raise PrefetchError(f"Prefetch command '{binary}' was not found on PATH")

        retrying = Retrying(
            reraise=True,
            stop=stop_after_attempt(self.attempts),
            wait=wait_fixed(self.wait_seconds),
            retry=retry_if_exception_type(PrefetchError),
        )
        stdout = retrying(self._run, locator)
        result = parse_prefetch_output(stdout, locator)
        logger.debug("Prefetched %s -> %s", locator, result.hash)
        return result

    def _run(self, locator: str) -> str:
        argv = [*self.command, locator]
        logger.debug("Running %s", " ".join(argv))
        completed = subprocess.run(
            argv,
            check=False,
            text=True,
            capture_output=True,
        )
        if completed.returncode != 0:
            raise PrefetchError(
                f"Prefetch of {locator} failed with exit code {completed.returncode}: "
                f"{completed.stderr.strip()}"
            )
        return completed.stdout
