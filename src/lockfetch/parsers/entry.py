"""Decode a single bun.lock package entry into a fetcher.

Entries carry no explicit type tag. The number of values in the entry
tuple selects the package shape, and the identifier's specifier
(``github:``, ``git+``, ``http``, ``file:``, ``workspace:``) narrows it down
from there:

==========  ==============  ==============================================
Arity       Shape           Layout
==========  ==============  ==============================================
1           workspace       ``[identifier]``
2           tarball / file  ``[identifier, metadata]``
3           git / github    ``[identifier, metadata, bun_tag]``
4           npm             ``[identifier, tarball_url, metadata, hash]``
==========  ==============  ==============================================

Decoders consume the value list they are given.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeAlias

from ..errors import (
    EmptyFieldError,
    ImproperGitHubUrlError,
    MissingFileSpecifierError,
    MissingGitRefError,
    MissingWorkspaceSpecifierError,
    NoAtInIdentifierError,
    UnexpectedEntryLengthError,
)
from ..models import CopyToStore, FetchGit, FetchGitHub, FetchTarball, Package
from ..prefetch import Prefetcher
from ..registry import npm_fetcher
from .strings import drain_after_last, drop_prefix, split_once_owned, take_value

logger = logging.getLogger(__name__)

Values: TypeAlias = list[Any]
Decoder: TypeAlias = Callable[[str, Values, Prefetcher], Package]


def decode_npm_package(name: str, values: Values, prefetch: Prefetcher) -> Package:
    """Decode ``[identifier, tarball_url, metadata, hash]``.

    ``tarball_url`` is empty for the default registry and holds the exact
    tarball URL otherwise. The SRI hash is taken from the entry as-is.
    """
    identifier = take_value(values, 0)
    # values is now [hash, tarball_url, metadata]
    integrity = take_value(values, 0)
    # values is now [metadata, tarball_url]
    tarball_url = values[1] if isinstance(values[1], str) and values[1] else None

    if not integrity:
        raise EmptyFieldError("hash", identifier)
    if drain_after_last(identifier, "@") == "":
        raise EmptyFieldError("version", identifier)

    assert "sha512-" in integrity, f"Expected an SRI sha512 hash, got {integrity!r}"

    return Package(name=identifier, fetcher=npm_fetcher(identifier, integrity, tarball_url))


def decode_git_or_github_package(name: str, values: Values, prefetch: Prefetcher) -> Package:
    identifier = take_value(values, 0)
    spec = drain_after_last(identifier, "@")
    if spec is None:
        raise NoAtInIdentifierError(identifier)

    if spec.startswith("github:"):
        return decode_github_package(spec, prefetch)
    return decode_git_package(spec, prefetch)


def decode_github_package(spec: str, prefetch: Prefetcher) -> Package:
    """Decode ``github:<owner>/<repo>#<rev>``."""
    split = split_once_owned(spec, "#")
    if split is None:
        raise MissingGitRefError(spec)
    path, rev = split
    if not rev:
        raise MissingGitRefError(spec)

    split = split_once_owned(path, "/")
    if split is None:
        raise ImproperGitHubUrlError(path)
    owner, repo = split
    owner = drop_prefix(owner, "github:")
    if not owner or not repo:
        raise ImproperGitHubUrlError(path)

    result = prefetch(f"{path}?ref={rev}")

    fetcher = FetchGitHub(owner=owner, repo=repo, rev=rev, hash=result.hash)
    return Package(name=f"github:{owner}-{repo}-{rev}", fetcher=fetcher)


def decode_git_package(spec: str, prefetch: Prefetcher) -> Package:
    """Decode ``git+<url>#<rev>``."""
    spec = drop_prefix(spec, "git+")
    split = split_once_owned(spec, "#")
    if split is None:
        raise MissingGitRefError(spec)
    url, rev = split
    if not rev:
        raise MissingGitRefError(spec)
    if not url:
        raise EmptyFieldError("url", spec)

    result = prefetch(f"git+{url}?rev={rev}")

    fetcher = FetchGit(url=url, rev=rev, hash=result.hash)
    return Package(name=f"git:{rev}", fetcher=fetcher)


def decode_tarball_or_file_package(name: str, values: Values, prefetch: Prefetcher) -> Package:
    """Decode ``name@<url>`` or ``name@file:<path>``.

    Both shapes share arity 2; paths starting with ``http`` are tarballs.
    """
    identifier = take_value(values, 0)
    path = drain_after_last(identifier, "@")
    if path is None:
        raise NoAtInIdentifierError(identifier)

    if path.startswith("http"):
        return decode_tarball_package(path, prefetch)
    return decode_file_package(name, path)


def decode_tarball_package(url: str, prefetch: Prefetcher) -> Package:
    assert "http" in url, f"Expected a tarball URL, got {url!r}"

    result = prefetch(url)
    return Package(name=f"tarball:{url}", fetcher=FetchTarball(url=url, hash=result.hash))


def decode_file_package(name: str, path: str) -> Package:
    assert "http" not in path, f"File path {path!r} looks like a tarball URL"

    local_path = drain_after_last(path, "file:")
    if local_path is None:
        raise MissingFileSpecifierError(path)
    if not name:
        raise EmptyFieldError("name", path)
    return Package(name=name, fetcher=CopyToStore(path=local_path))


def decode_workspace_package(name: str, values: Values, prefetch: Prefetcher) -> Package:
    identifier = take_value(values, 0)
    path = drain_after_last(identifier, "workspace:")
    if path is None:
        raise MissingWorkspaceSpecifierError(identifier)
    if not name:
        raise EmptyFieldError("name", identifier)
    return Package(name=name, fetcher=CopyToStore(path=path))


# Closed set of entry shapes, keyed by arity.
DECODERS: dict[int, Decoder] = {
    1: decode_workspace_package,
    2: decode_tarball_or_file_package,
    3: decode_git_or_github_package,
    4: decode_npm_package,
}


def decode_package(name: str, values: Values, prefetch: Prefetcher) -> Package:
    """Decode one ``(name, values)`` lockfile entry into a package.

    Args:
        name: The entry's key in the lockfile ``packages`` object.
        values: The entry tuple. It is consumed by decoding.
        prefetch: Called with a locator for shapes whose hash is not
            recorded in the lockfile.

    Raises:
        DecodeError: If the entry is malformed.
        PrefetchError: If a required hash cannot be prefetched.
    """
    decoder = DECODERS.get(len(values))
    if decoder is None:
        raise UnexpectedEntryLengthError(len(values))

    logger.debug("Decoding %s with %s", name, decoder.__name__)
    return decoder(name, values, prefetch)
