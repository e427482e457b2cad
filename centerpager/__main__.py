"""Centerpager CLI entry point.

Allows running via `python -m centerpager` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import importlib.metadata
import sys
from typing import Optional

from .constants import PagerConstants
from .errors import PagerError


def get_version_string() -> str:
    try:
        return importlib.metadata.version(PagerConstants.PROGRAM_NAME)
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def main(argv: Optional[list[str]] = None) -> int:
    # Very small arg parsing: one file path, plus --version
    args = sys.argv[1:] if argv is None else argv
    if args and args[0] in ("--version", "-V"):
        print(f"{PagerConstants.PROGRAM_NAME} {get_version_string()}")
        return PagerConstants.EXIT_OK
    if len(args) != 1:
        print(PagerConstants.USAGE, file=sys.stderr)
        return PagerConstants.EXIT_USAGE

    # Lazy import to avoid importing terminal deps for --version
    from .pager import Pager
    try:
        pager = Pager(args[0])
        pager.run()
    except PagerError as e:
        print(f"{PagerConstants.PROGRAM_NAME}: {e}", file=sys.stderr)
        return PagerConstants.EXIT_ERROR
    return PagerConstants.EXIT_OK


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover
    run()
