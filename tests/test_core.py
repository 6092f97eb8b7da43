from pathlib import Path

import pytest
import requests

from lockfetch import core
from lockfetch.config import Settings
from lockfetch.errors import (
    DuplicatePackageError,
    EntryError,
    ImproperGitHubUrlError,
    LockfileError,
    MissingGitRefError,
    PrefetchError,
)
from lockfetch.models import CopyToStore, FetchGitHub, FetchUrl
from lockfetch.prefetch import PrefetchResult

LOCKFILE = """{
  "lockfileVersion": 1,
  "packages": {
    "zod": ["zod@3.23.8", "", {}, "sha512-zod=="],
    "app": ["app@workspace:packages/app"],
    "dep": ["dep@github:owner/repo#abc", {}, "owner-repo-abc"],
  },
}
"""


class _Response:
    def __init__(self, status_code: int, text: str = "") -> None:
        self.status_code = status_code
        self.text = text


def test_decode_packages_sorts_by_name(prefetcher) -> None:
    entries = [
        ("zod", ["zod@3.23.8", "", {}, "sha512-zod=="]),
        ("app", ["app@workspace:packages/app"]),
    ]

    report = core.decode_packages(entries, prefetch=prefetcher)

    assert [package.name for package in report.packages] == ["app", "zod@3.23.8"]
    assert report.skipped == []


def test_decode_packages_aborts_on_first_error(prefetcher) -> None:
    entries = [
        ("bad", ["bad@github:owner/repo", {}, "tag"]),
        ("app", ["app@workspace:packages/app"]),
    ]

    with pytest.raises(EntryError) as excinfo:
        core.decode_packages(entries, prefetch=prefetcher)

    assert excinfo.value.name == "bad"
    assert isinstance(excinfo.value.cause, MissingGitRefError)


def test_decode_packages_can_skip_errors(prefetcher) -> None:
    entries = [
        ("bad", ["bad@1.0.0"] * 5),
        ("app", ["app@workspace:packages/app"]),
    ]

    report = core.decode_packages(entries, prefetch=prefetcher, on_error="skip")

    assert [package.name for package in report.packages] == ["app"]
    assert report.skipped == ["bad"]


def test_decode_packages_skips_prefetch_failures() -> None:
    def failing(locator: str) -> PrefetchResult:
        raise PrefetchError("offline")

    entries = [("t", ["t@https://example.com/t.tgz", {}])]

    report = core.decode_packages(entries, prefetch=failing, on_error="skip")

    assert report.packages == []
    assert report.skipped == ["t"]


def test_decode_packages_collapses_duplicate_names(prefetcher) -> None:
    entries = [
        ("a", ["a@git+https://example.com/a.git#abc", {}, "tag"]),
        ("b", ["b@git+https://example.com/a.git#abc", {}, "tag"]),
    ]

    report = core.decode_packages(entries, prefetch=prefetcher)

    assert [package.name for package in report.packages] == ["git:abc"]


def test_decode_packages_rejects_unknown_policy(prefetcher) -> None:
    with pytest.raises(ValueError):
        core.decode_packages([], prefetch=prefetcher, on_error="ignore")  # type: ignore[arg-type]


def test_generate_from_path(tmp_path: Path, prefetcher) -> None:
    lock_path = tmp_path / "bun.lock"
    lock_path.write_text(LOCKFILE, encoding="utf-8")

    report = core.generate(lock_path, prefetch=prefetcher)

    by_name = {package.name: package.fetcher for package in report.packages}
    assert by_name == {
        "app": CopyToStore(path="packages/app"),
        "github:owner-repo-abc": FetchGitHub(
            owner="owner", repo="repo", rev="abc", hash="sha256-fake="
        ),
        "zod@3.23.8": FetchUrl(
            url="https://registry.npmjs.org/zod/-/zod-3.23.8.tgz", hash="sha512-zod=="
        ),
    }
    assert prefetcher.calls == ["github:owner/repo?ref=abc"]


def test_generate_from_url(monkeypatch: pytest.MonkeyPatch, prefetcher) -> None:
    seen: list[tuple[str, float]] = []

    def fake_get(url: str, timeout: float) -> _Response:
        seen.append((url, timeout))
        return _Response(200, LOCKFILE)

    monkeypatch.setattr(core, "_http_get", fake_get)

    report = core.generate(
        "https://example.com/bun.lock",
        settings=Settings(http_timeout=5),
        prefetch=prefetcher,
    )

    assert len(report.packages) == 3
    assert seen == [("https://example.com/bun.lock", 5)]


def test_fetch_lockfile_rejects_bad_status(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(core, "_http_get", lambda url, timeout: _Response(404))

    with pytest.raises(LockfileError, match="404"):
        core.fetch_lockfile("https://example.com/bun.lock")


def test_fetch_lockfile_wraps_request_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(url: str, timeout: float) -> _Response:
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(core, "_http_get", boom)

    with pytest.raises(LockfileError, match="refused"):
        core.fetch_lockfile("https://example.com/bun.lock")


def test_report_to_dict(prefetcher) -> None:
    report = core.decode_packages([("app", ["app@workspace:."])], prefetch=prefetcher)

    assert report.to_dict() == {
        "packages": [{"name": "app", "fetcher": {"kind": "copy-to-store", "path": "."}}],
        "skipped": [],
    }


def test_decode_packages_skips_entries_with_empty_fields(prefetcher) -> None:
    entries = [
        ("lib", ["lib@git+https://example.com/repo.git#", {}, "tag"]),
        ("x", ["x@github:owner/#abc", {}, "tag"]),
        ("app", ["app@workspace:packages/app"]),
    ]

    report = core.decode_packages(entries, prefetch=prefetcher, on_error="skip")

    assert [package.name for package in report.packages] == ["app"]
    assert report.skipped == ["lib", "x"]


def test_decode_packages_aborts_on_empty_github_repo(prefetcher) -> None:
    entries = [("x", ["x@github:owner/#abc", {}, "tag"])]

    with pytest.raises(EntryError) as excinfo:
        core.decode_packages(entries, prefetch=prefetcher)

    assert excinfo.value.name == "x"
    assert isinstance(excinfo.value.cause, ImproperGitHubUrlError)


def test_decode_packages_rejects_conflicting_duplicate_names(prefetcher) -> None:
    entries = [
        ("a", ["a@git+https://example.com/a.git#abc", {}, "tag"]),
        ("b", ["b@git+https://example.com/b.git#abc", {}, "tag"]),
    ]

    with pytest.raises(EntryError) as excinfo:
        core.decode_packages(entries, prefetch=prefetcher)

    assert excinfo.value.name == "b"
    assert isinstance(excinfo.value.cause, DuplicatePackageError)


def test_decode_packages_skips_conflicting_duplicate_names(prefetcher) -> None:
    entries = [
        ("a", ["a@git+https://example.com/a.git#abc", {}, "tag"]),
        ("b", ["b@git+https://example.com/b.git#abc", {}, "tag"]),
    ]

    report = core.decode_packages(entries, prefetch=prefetcher, on_error="skip")

    assert [package.fetcher.url for package in report.packages] == ["https://example.com/a.git"]
    assert report.skipped == ["b"]
