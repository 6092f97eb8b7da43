"""Package model pairing a display name with its fetcher."""

from __future__ import annotations

from dataclasses import dataclass

from .fetcher import FetchDescriptor


@dataclass(frozen=True, slots=True)
class Package:
    """A decoded lockfile entry, ready to be rendered."""

    name: str
    fetcher: FetchDescriptor

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Package name must be non-empty")

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "fetcher": self.fetcher.to_dict(),
        }
