#!/usr/bin/env python3
"""
dirsnap command line - snapshot a directory tree and its file contents.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from . import __version__
from .core.engine import SnapshotStream, snapshot
from .io.formatter import OutputFormat, OutputFormatter, write_output
from .models.entries import SnapshotResult
from .models.options import BinaryDetection, SnapshotOptions
from .utils.exceptions import SnapshotError
from .utils.logging import setup_logging

FORMATS = ["json", "tree", "paths", "markdown", "text"]
MODES = ["normal", "tree-only", "paths-only", "streaming"]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="dirsnap",
        description="Snapshot a directory tree and the contents of its files",
    )
    parser.add_argument(
        "root",
        nargs="?",
        type=Path,
        default=Path("."),
        help="Root directory (default: current directory)",
    )
    parser.add_argument(
        "--format",
        choices=FORMATS,
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--binary-detection",
        choices=[method.value for method in BinaryDetection],
        default=BinaryDetection.SIMPLE.value,
        help="Binary detection strategy (default: simple)",
    )
    parser.add_argument(
        "--max-depth", type=int, help="Maximum depth (unlimited if not set)"
    )
    parser.add_argument(
        "-I",
        "--ignore",
        dest="ignore_patterns",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Glob pattern to exclude, matched against the full path (repeatable)",
    )
    parser.add_argument(
        "--file-size-limit",
        type=int,
        metavar="BYTES",
        help="Files larger than this have their content omitted",
    )
    parser.add_argument(
        "--include-size", action="store_true", help="Report the size of each file"
    )
    parser.add_argument(
        "-p", "--pretty", action="store_true", help="Pretty output (indented JSON)"
    )
    parser.add_argument("--hidden", action="store_true", help="Include hidden files")
    parser.add_argument(
        "--follow-links", action="store_true", help="Follow symbolic links"
    )
    parser.add_argument(
        "--no-gitignore", action="store_true", help="Disable .gitignore handling"
    )
    parser.add_argument(
        "--mode", choices=MODES, default="normal", help="Operation mode"
    )
    parser.add_argument(
        "--parallel", action="store_true", help="Read files on a thread pool"
    )
    parser.add_argument(
        "--max-workers", type=int, help="Thread pool size for --parallel"
    )
    parser.add_argument(
        "--output", "-o", type=Path, help="Write output to a file instead of stdout"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def render(result: SnapshotResult, output_format: str, mode: str, pretty: bool) -> str:
    """Render an eager result for the chosen format and mode."""
    if mode == "tree-only" or output_format == "tree":
        return result.tree + "\n"
    if mode == "paths-only" or output_format == "paths":
        return "".join(f"{path}\n" for path in result.paths)

    text = OutputFormatter().format(result, OutputFormat(output_format), pretty)
    if output_format == "json":
        text += "\n"
    return text


def run_streaming(options: SnapshotOptions, pretty: bool) -> int:
    """Print one JSON object per file; report failed items and keep going."""
    formatter = OutputFormatter()
    failures = 0
    with SnapshotStream(options) as stream:
        for item in stream:
            if isinstance(item, SnapshotError):
                failures += 1
                print(f"Error: {item}", file=sys.stderr)
                continue
            print(formatter.format_entry(item, pretty), flush=True)
    return 1 if failures else 0


def main(argv: Optional[list[str]] = None) -> None:
    """Command line entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(log_file=args.log_file, verbose=args.verbose)

    try:
        options = SnapshotOptions.from_cli_args(vars(args))
    except ValidationError as e:
        print(f"Error: invalid options: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.mode == "streaming":
            sys.exit(run_streaming(options, args.pretty))

        result = snapshot(options, parallel=args.parallel, max_workers=args.max_workers)
        text = render(result, args.format, args.mode, args.pretty)

        if args.output:
            write_output(text, args.output, args.format)
        else:
            sys.stdout.write(text)

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        sys.exit(130)
    except SnapshotError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
