"""lockfetch core package.

Turns bun.lock package entries into typed fetcher descriptions that a
Nix expression can use to fetch every dependency reproducibly.
"""

__all__ = [
    "core",
]
