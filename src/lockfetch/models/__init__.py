"""Data models for decoded lockfile packages."""

from __future__ import annotations

from .fetcher import (
    CopyToStore,
    FetchDescriptor,
    FetchGit,
    FetchGitHub,
    FetchTarball,
    FetchUrl,
)
from .package import Package

__all__ = [
    "CopyToStore",
    "FetchDescriptor",
    "FetchGit",
    "FetchGitHub",
    "FetchTarball",
    "FetchUrl",
    "Package",
]
