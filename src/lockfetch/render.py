"""Render decoded packages as a Nix expression or JSON."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from typing import Any

from .models import CopyToStore, FetchGit, FetchGitHub, FetchTarball, FetchUrl, Package

HEADER = (
    "# This file was generated by lockfetch from a bun.lock file.",
    "# Regenerate it instead of editing it by hand.",
)

FETCHER_ARGS = (
    "copyPathToStore",
    "fetchFromGitHub",
    "fetchgit",
    "fetchurl",
    # Callers may pass a fetchurl that adds registry credentials.
    "fetchurlWithAuth ? fetchurl",
    "fetchzip",
)


def nix_string(value: str) -> str:
    """Quote ``value`` as a Nix string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("${", "\\${")
    return f'"{escaped}"'


def nix_path(path: str) -> str:
    """Return a Nix path expression for a lockfile-relative path."""
    if path.startswith("/"):
        return f"(/. + {nix_string(path)})"
    relative = path[2:] if path.startswith("./") else path
    if relative in ("", "."):
        return "./."
    return f"(./. + {nix_string('/' + relative)})"


def _attrs(function: str, pairs: list[tuple[str, str]]) -> list[str]:
    lines = [f"{function} {{"]
    for key, value in pairs:
        lines.append(f"  {key} = {nix_string(value)};")
    lines.append("}")
    return lines


def _render_fetchurl(fetcher: FetchUrl) -> list[str]:
    pairs = [("url", fetcher.url), ("hash", fetcher.hash)]
    if fetcher.name is None:
        return _attrs("fetchurl", pairs)
    # Only non-default registries set a name, and those may need auth.
    pairs.append(("name", fetcher.name))
    return _attrs("fetchurlWithAuth", pairs)


def _render_fetchgit(fetcher: FetchGit) -> list[str]:
    return _attrs("fetchgit", [("url", fetcher.url), ("rev", fetcher.rev), ("hash", fetcher.hash)])


def _render_fetchgithub(fetcher: FetchGitHub) -> list[str]:
    return _attrs(
        "fetchFromGitHub",
        [
            ("owner", fetcher.owner),
            ("repo", fetcher.repo),
            ("rev", fetcher.rev),
            ("hash", fetcher.hash),
        ],
    )


def _render_fetchtarball(fetcher: FetchTarball) -> list[str]:
    return _attrs("fetchzip", [("url", fetcher.url), ("hash", fetcher.hash)])


def _render_copy_to_store(fetcher: CopyToStore) -> list[str]:
    return [f"copyPathToStore {nix_path(fetcher.path)}"]


# One template per fetcher variant.
_TEMPLATES: dict[type, Callable[[Any], list[str]]] = {
    FetchUrl: _render_fetchurl,
    FetchGit: _render_fetchgit,
    FetchGitHub: _render_fetchgithub,
    FetchTarball: _render_fetchtarball,
    CopyToStore: _render_copy_to_store,
}


def render_fetcher(package: Package) -> list[str]:
    """Return the lines of the ``name = <fetcher>;`` binding for a package."""
    template = _TEMPLATES.get(type(package.fetcher))
    if template is None:
        raise TypeError(f"No template for fetcher type {type(package.fetcher).__name__}")

    body = template(package.fetcher)
    lines = [f"{nix_string(package.name)} = {body[0]}"]
    lines.extend(body[1:])
    lines[-1] += ";"
    return lines


def render_nix(packages: Iterable[Package]) -> str:
    """Return a Nix file mapping each package name to its fetcher."""
    lines = list(HEADER)
    lines.append("{")
    for arg in FETCHER_ARGS:
        lines.append(f"  {arg},")
    lines.append("  ...")
    lines.append("}:")
    lines.append("{")

    for package in sorted(packages, key=lambda p: p.name):
        lines.extend(f"  {line}" for line in render_fetcher(package))

    lines.append("}")
    return "\n".join(lines) + "\n"


def render_json(packages: Iterable[Package]) -> str:
    payload = [package.to_dict() for package in sorted(packages, key=lambda p: p.name)]
    return json.dumps(payload, indent=2) + "\n"
