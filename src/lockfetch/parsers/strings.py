"""String helpers that consume their input and hand back the pieces.

Callers treat the input as spent once passed in: ``take_value`` mutates the
value list, and the remaining helpers are always used in a
``text = helper(text, ...)`` style so no stale copy is read afterwards.
"""

from __future__ import annotations

from typing import Any


def take_value(values: list[Any], index: int) -> str:
    """Remove ``values[index]`` in O(1) and return it.

    The last element is swapped into the vacated slot, so the order of the
    remaining values is not preserved.
    """
    last = values.pop()
    if index < len(values):
        value, values[index] = values[index], last
    else:
        value = last

    # json.loads already stripped the surrounding quotes of string values
    assert isinstance(value, str), f"Lockfile value should be a string, got {value!r}"
    return value


def split_once_owned(text: str, char: str) -> tuple[str, str] | None:
    """Split on the first ``char``, dropping the separator itself."""
    pos = text.find(char)
    if pos < 0:
        return None
    return text[:pos], text[pos + len(char) :]


def drop_prefix(text: str, prefix: str) -> str:
    if text.startswith(prefix):
        return text[len(prefix) :]
    return text


def drain_after_last(text: str, sub: str) -> str | None:
    """Return everything after the last occurrence of ``sub``."""
    pos = text.rfind(sub)
    if pos < 0:
        return None
    return text[pos + len(sub) :]
