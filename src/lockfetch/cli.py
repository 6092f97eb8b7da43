"""Command-line entrypoint: turn a bun.lock into a Nix fetcher set."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .config import ConfigError, load_settings
from .core import generate
from .errors import EntryError, LockfileError
from .render import render_json, render_nix


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="lockfetch", description=__doc__)
    parser.add_argument(
        "--lock",
        dest="lock_source",
        default="bun.lock",
        help="Path or http(s) URL of the lockfile to convert",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="File to write the result to (default: stdout)",
    )
    parser.add_argument("--format", choices=("nix", "json"), default="nix")
    parser.add_argument("--config", type=Path, default=None, help="Path to a settings JSON file")
    parser.add_argument(
        "--skip-errors",
        action="store_true",
        help="Leave out entries that fail to decode instead of aborting",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        settings = load_settings(args.config)
        if args.skip_errors:
            settings = replace(settings, on_error="skip")
        report = generate(args.lock_source, settings=settings)
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except LockfileError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except EntryError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.format == "json":
        rendered = render_json(report.packages)
    else:
        rendered = render_nix(report.packages)

    if args.output is None:
        sys.stdout.write(rendered)
    else:
        args.output.write_text(rendered, encoding="utf-8")

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
