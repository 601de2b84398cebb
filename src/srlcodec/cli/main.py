"""Main CLI entry point for srlcodec."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .. import __version__
from ..cli.inspect import inspect_file
from ..config import DecoderConfig
from ..exceptions import SrlError


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the srlcodec CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="srlcodec: Tagged Binary Codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  srlcodec --inspect document.srl                   Show header and value tree
  srlcodec --inspect document.srl --max-depth 64    Bound nesting while decoding
  srlcodec --version                                 Show version
        """,
    )

    parser.add_argument(
        "--inspect",
        metavar="FILE",
        type=str,
        help="Decode an encoded document and print its header and value tree",
    )

    parser.add_argument(
        "--max-depth",
        metavar="N",
        type=int,
        default=None,
        help="Maximum nesting depth accepted while decoding",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"srlcodec {__version__}",
    )

    args = parser.parse_args(argv)

    # Handle --inspect
    if args.inspect:
        file_path = Path(args.inspect)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            config = DecoderConfig() if args.max_depth is None else DecoderConfig(max_recursion_depth=args.max_depth)
            inspect_file(file_path, config)
            return 0
        except (SrlError, OSError) as e:
            print(f"Error inspecting file: {e}", file=sys.stderr)
            return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
