"""Parse bun.lock to capture its package entries."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..errors import LockfileError

logger = logging.getLogger(__name__)

_CLOSERS = {"}", "]"}


def _strip_trailing_commas(text: str) -> str:
    """Drop commas directly preceding ``}`` or ``]`` outside string literals."""
    out: list[str] = []
    in_string = False
    escaped = False
    length = len(text)

    for index, char in enumerate(text):
        if in_string:
            out.append(char)
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == ",":
            lookahead = index + 1
            while lookahead < length and text[lookahead].isspace():
                lookahead += 1
            if lookahead < length and text[lookahead] in _CLOSERS:
                continue
        out.append(char)

    return "".join(out)


def loads(text: str) -> list[tuple[str, list[Any]]]:
    """Return list of (name, values) from the lockfile ``packages`` object.

    Entries keep their document order.
    """
    try:
        data = json.loads(_strip_trailing_commas(text))
    except json.JSONDecodeError as exc:
        raise LockfileError(f"Invalid lockfile JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise LockfileError("Lockfile must be a JSON object")

    logger.debug("Lockfile version: %s", data.get("lockfileVersion"))

    packages = data.get("packages", {})
    if not isinstance(packages, dict):
        raise LockfileError("Lockfile 'packages' must be an object")

    entries: list[tuple[str, list[Any]]] = []
    for name, values in packages.items():
        if not isinstance(values, list):
            raise LockfileError(f"Lockfile entry '{name}' must be an array")
        entries.append((name, values))

    return entries


def parse(path: Path) -> list[tuple[str, list[Any]]]:
    """Return list of (name, values) from a bun.lock file on disk."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LockfileError(f"Failed to read lockfile {path}: {exc}") from exc
    return loads(text)
