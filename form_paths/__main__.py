"""Interface for ``python -m form_paths``."""

from __future__ import annotations

import json
import logging
import sys
from argparse import ArgumentParser, FileType
from datetime import date
from typing import TYPE_CHECKING, Any

from ._version import version
from .extraction import UNSET, extract


if TYPE_CHECKING:
    from collections.abc import Sequence


__all__ = ["main"]


LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _to_json(value: Any) -> Any:
    if value is UNSET:
        return None
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return str(value)


def _load_entries(document: Any) -> list[tuple[str, Any]]:
    pairs = document.items() if isinstance(document, dict) else document
    entries: list[tuple[str, Any]] = []
    for pair in pairs:
        key, value = pair
        if value is not None and not isinstance(value, str):
            value = json.dumps(value)
        entries.append((key, value))
    return entries


def main(args: Sequence[str] | None = None) -> int:
    """Argument parser for the CLI."""
    parser = ArgumentParser(prog="form-paths")
    _ = parser.add_argument("-v", "--version", action="version", version=version)
    _ = parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="logging level (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser("extract", help="rebuild a nested record from flat form entries")
    _ = extract_parser.add_argument(
        "file", type=FileType("r"), help="JSON object or list of [key, value] pairs ('-' for stdin)"
    )
    options = parser.parse_args(args)

    logging.basicConfig(level=options.log_level, format="%(levelname)s %(name)s: %(message)s")

    with options.file as handle:
        document = json.load(handle)
    result = extract(_load_entries(document))

    output = {
        "combined": result.combined,
        "fields": result.fields,
        "files": result.files,
        "issues": [{"key": issue.key, "kind": issue.kind, "message": str(issue.error)} for issue in result.issues],
    }
    json.dump(output, sys.stdout, default=_to_json, indent=2)
    _ = sys.stdout.write("\n")
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
