#!/usr/bin/env python3
"""Install a converter from a repository URL and convert one file."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from format_converter import convert_file, create_manager
from format_converter.errors import FormatConverterError


def main() -> int:
    """Add the converter at ``--source`` if needed, then convert INPUT to OUTPUT."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("input", type=Path)
    parser.add_argument("output", type=Path)
    parser.add_argument("--source", help="Repository URL of a converter to install first.")
    args = parser.parse_args()

    try:
        manager = create_manager()
        if args.source and not manager.add_converter(args.source):
            print(f"Could not add {args.source}: {manager.last_error}", file=sys.stderr)
            return 1
        result = convert_file(manager, args.input, args.output)
    except FormatConverterError as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return exc.exit_code

    print(f"{result.input_path} -> {result.output_path} ({result.converter})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
