"""Lockfile parsing and per-entry decoding."""

from __future__ import annotations

from .entry import DECODERS, decode_package
from .strings import drain_after_last, drop_prefix, split_once_owned, take_value

__all__ = [
    "DECODERS",
    "decode_package",
    "drain_after_last",
    "drop_prefix",
    "split_once_owned",
    "take_value",
]
