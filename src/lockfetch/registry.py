"""npm registry URL synthesis for tarball fetchers."""

from __future__ import annotations

from .errors import NoAtInIdentifierError
from .models import FetchUrl

DEFAULT_REGISTRY = "https://registry.npmjs.org/"


def build_npm_url(identifier: str, tarball_url: str | None = None) -> str:
    """Return the URL an npm package tarball is downloaded from.

    A non-empty ``tarball_url`` (recorded for packages served by a
    non-default registry) is returned verbatim. Otherwise the URL is built
    against ``DEFAULT_REGISTRY`` from ``name@version`` or
    ``@scope/name@version``.

    Raises:
        NoAtInIdentifierError: If the identifier carries no version.
    """
    if tarball_url:
        return tarball_url

    user, sep, name_and_version = identifier.partition("/")
    if not sep:
        name, sep, version = identifier.partition("@")
        if not sep:
            raise NoAtInIdentifierError(identifier)
        return f"{DEFAULT_REGISTRY}{name}/-/{name}-{version}.tgz"

    name, sep, version = name_and_version.partition("@")
    if not sep:
        raise NoAtInIdentifierError(identifier)
    return f"{DEFAULT_REGISTRY}{user}/{name}/-/{name}-{version}.tgz"


def derive_archive_filename(identifier: str) -> str:
    """Best-effort ``<name>-<version>.tgz`` filename for an identifier."""
    _, sep, name_and_version = identifier.partition("/")
    if sep and "@" in name_and_version:
        name, _, version = name_and_version.partition("@")
        return f"{name}-{version}.tgz"

    if "@" in identifier:
        name, _, version = identifier.partition("@")
        return f"{name}-{version}.tgz"

    return f"{identifier}.tgz"


def npm_fetcher(identifier: str, hash: str, tarball_url: str | None = None) -> FetchUrl:
    """Build the fetcher for a registry package.

    ``name`` is left unset for the default registry, whose URLs already end
    in a proper archive filename.
    """
    url = build_npm_url(identifier, tarball_url)
    name = derive_archive_filename(identifier) if tarball_url else None
    return FetchUrl(url=url, hash=hash, name=name)
