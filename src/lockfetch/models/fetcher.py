"""Fetcher models describing how one package's content is retrieved."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, TypeAlias


def _require(value: str, field_name: str, kind: str) -> None:
    if not value:
        raise ValueError(f"{kind} requires a non-empty {field_name}")


@dataclass(frozen=True, slots=True)
class FetchUrl:
    """Plain HTTP download, pinned by the SRI hash from the lockfile.

    ``name`` is only set for tarballs served from a non-default registry, so
    the downloaded file keeps a ``.tgz`` extension.
    """

    kind: ClassVar[str] = "fetchurl"

    url: str
    hash: str
    name: str | None = None

    def __post_init__(self) -> None:
        _require(self.url, "url", self.kind)
        _require(self.hash, "hash", self.kind)

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"kind": self.kind, "url": self.url, "hash": self.hash}
        if self.name is not None:
            data["name"] = self.name
        return data


@dataclass(frozen=True, slots=True)
class FetchGit:
    kind: ClassVar[str] = "fetchgit"

    url: str
    rev: str
    hash: str

    def __post_init__(self) -> None:
        _require(self.url, "url", self.kind)
        _require(self.rev, "rev", self.kind)
        _require(self.hash, "hash", self.kind)

    def to_dict(self) -> dict[str, object]:
        return {"kind": self.kind, "url": self.url, "rev": self.rev, "hash": self.hash}


@dataclass(frozen=True, slots=True)
class FetchGitHub:
    kind: ClassVar[str] = "fetchgithub"

    owner: str
    repo: str
    rev: str
    hash: str

    def __post_init__(self) -> None:
        _require(self.owner, "owner", self.kind)
        _require(self.repo, "repo", self.kind)
        _require(self.rev, "rev", self.kind)
        _require(self.hash, "hash", self.kind)

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind,
            "owner": self.owner,
            "repo": self.repo,
            "rev": self.rev,
            "hash": self.hash,
        }


@dataclass(frozen=True, slots=True)
class FetchTarball:
    """Remote tarball, unpacked on fetch and pinned by a prefetched hash."""

    kind: ClassVar[str] = "fetchtarball"

    url: str
    hash: str

    def __post_init__(self) -> None:
        _require(self.url, "url", self.kind)
        _require(self.hash, "hash", self.kind)

    def to_dict(self) -> dict[str, object]:
        return {"kind": self.kind, "url": self.url, "hash": self.hash}


@dataclass(frozen=True, slots=True)
class CopyToStore:
    """Local path copied as-is; never carries a hash."""

    kind: ClassVar[str] = "copy-to-store"

    path: str

    def to_dict(self) -> dict[str, object]:
        return {"kind": self.kind, "path": self.path}


FetchDescriptor: TypeAlias = FetchUrl | FetchGit | FetchGitHub | FetchTarball | CopyToStore
