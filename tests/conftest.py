"""Shared test fixtures."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from lockfetch.prefetch import PrefetchResult


@dataclass(slots=True)
class FakePrefetcher:
    """Deterministic stand-in for nix prefetching that records its locators."""

    hashes: dict[str, str] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    def __call__(self, locator: str) -> PrefetchResult:
        self.calls.append(locator)
        return PrefetchResult(hash=self.hashes.get(locator, "sha256-fake="))


@pytest.fixture
def prefetcher() -> FakePrefetcher:
    return FakePrefetcher()
