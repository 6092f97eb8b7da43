"""Error types raised while turning lockfile entries into fetchers."""

from __future__ import annotations


class DecodeError(RuntimeError):
    """Base error for a lockfile entry that cannot be decoded."""


class UnexpectedEntryLengthError(DecodeError):
    """Raised when an entry's value list has an arity outside 1..4."""

    def __init__(self, length: int) -> None:
        super().__init__(f"Unexpected lockfile entry length: {length}")
        self.length = length


class NoAtInIdentifierError(DecodeError):
    """Raised when a package identifier has no `@` version separator."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"No '@' found in package identifier: {identifier!r}")
        self.identifier = identifier


class MissingGitRefError(DecodeError):
    """Raised when a git or GitHub specifier has no `#<rev>` suffix."""

    def __init__(self, spec: str) -> None:
        super().__init__(f"Missing git ref ('#') in specifier: {spec!r}")
        self.spec = spec


class ImproperGitHubUrlError(DecodeError):
    """Raised when a GitHub specifier is not of the form owner/repo."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Improper GitHub URL, expected 'owner/repo': {path!r}")
        self.path = path


class MissingFileSpecifierError(DecodeError):
    """Raised when a local package path lacks the `file:` specifier."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Missing 'file:' specifier in: {path!r}")
        self.path = path


class MissingWorkspaceSpecifierError(DecodeError):
    """Raised when a workspace entry lacks the `workspace:` specifier."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Missing 'workspace:' specifier in: {identifier!r}")
        self.identifier = identifier


class EmptyFieldError(DecodeError):
    """Raised when a required field of a lockfile entry decodes to an empty string."""

    def __init__(self, field: str, identifier: str) -> None:
        super().__init__(f"Empty {field} in package identifier: {identifier!r}")
        self.field = field
        self.identifier = identifier


class DuplicatePackageError(DecodeError):
    """Raised when two entries decode to the same name but different fetchers."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Package name {name!r} is already taken by a different fetcher")
        self.name = name


class PrefetchError(RuntimeError):
    """Raised when a content hash cannot be obtained for a locator."""


class LockfileError(RuntimeError):
    """Raised when the lockfile document cannot be read or parsed."""


class EntryError(RuntimeError):
    """Raised when a named lockfile entry fails to decode."""

    def __init__(self, name: str, cause: Exception) -> None:
        super().__init__(f"Failed to decode package '{name}': {cause}")
        self.name = name
        self.cause = cause


__all__ = [
    "DecodeError",
    "DuplicatePackageError",
    "EmptyFieldError",
    "EntryError",
    "ImproperGitHubUrlError",
    "LockfileError",
    "MissingFileSpecifierError",
    "MissingGitRefError",
    "MissingWorkspaceSpecifierError",
    "NoAtInIdentifierError",
    "PrefetchError",
    "UnexpectedEntryLengthError",
]
