"""Configuration loader for lockfile decoding.

Reads settings from a JSON file (default: ``lockfetch.json`` in the current
directory) and validates it against ``SETTINGS_SCHEMA``. Every field is
optional; omitted fields keep their defaults.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal

from jsonschema import Draft202012Validator

from .prefetch import DEFAULT_PREFETCH_COMMAND

DEFAULT_CONFIG_PATH = Path("lockfetch.json")
CONFIG_PATH_ENV_VAR = "LOCKFETCH_CONFIG"

OnError = Literal["abort", "skip"]

SETTINGS_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "prefetchCommand": {
            "type": "array",
            "items": {"type": "string", "minLength": 1},
            "minItems": 1,
        },
        "prefetchAttempts": {"type": "integer", "minimum": 1},
        "prefetchWaitSeconds": {"type": "number", "minimum": 0},
        "onError": {"enum": ["abort", "skip"]},
        "httpTimeout": {"type": "number", "exclusiveMinimum": 0},
    },
}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be loaded or is invalid."""


@dataclass(slots=True, frozen=True)
class Settings:
    """Top-level settings container."""

    prefetch_command: tuple[str, ...] = DEFAULT_PREFETCH_COMMAND
    prefetch_attempts: int = 3
    prefetch_wait_seconds: float = 2
    on_error: OnError = "abort"
    http_timeout: float = 30

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create Settings from a validated dictionary."""
        settings = cls()
        if "prefetchCommand" in data:
            settings = replace(settings, prefetch_command=tuple(data["prefetchCommand"]))
        if "prefetchAttempts" in data:
            settings = replace(settings, prefetch_attempts=data["prefetchAttempts"])
        if "prefetchWaitSeconds" in data:
            settings = replace(settings, prefetch_wait_seconds=data["prefetchWaitSeconds"])
        if "onError" in data:
            settings = replace(settings, on_error=data["onError"])
        if "httpTimeout" in data:
            settings = replace(settings, http_timeout=data["httpTimeout"])
        return settings


def _format_errors(errors: list[Any]) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)


def _resolve_config_path(path: Path | str | None = None) -> tuple[Path, bool]:
    """Resolve the configuration file path.

    Priority:
    1. Explicit path argument
    2. LOCKFETCH_CONFIG environment variable
    3. Default path (lockfetch.json in the working directory)

    The flag is True when the path was requested explicitly and must exist.
    """
    if path is not None:
        return Path(path), True

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path), True

    return DEFAULT_CONFIG_PATH, False


def load_settings(path: Path | str | None = None) -> Settings:
    """Load and validate settings from a JSON file.

    Args:
        path: Optional path to the config file. If not provided, uses the
            LOCKFETCH_CONFIG env var or falls back to lockfetch.json.

    Returns:
        A Settings object. Defaults are returned when no file was requested
        and the default file does not exist.

    Raises:
        ConfigError: If the file cannot be read or contains invalid data.
    """
    config_path, required = _resolve_config_path(path)

    if not config_path.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_path}")
        return Settings()

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file: {exc}") from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in configuration file: {exc}") from exc

    validator = Draft202012Validator(SETTINGS_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: "/".join(str(p) for p in e.path))
    if errors:
        raise ConfigError(f"Invalid configuration in {config_path}:\n{_format_errors(errors)}")

    return Settings.from_dict(data)
