#!/usr/bin/env python3
"""
whoimportme CLI

Find every file in a source tree that imports a given file or directory,
following relative paths, import maps and tsconfig path mappings.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from exporters import to_json, to_mermaid, to_text, to_yaml
from importscan import __version__
from importscan.discovery import DEFAULT_EXTENSIONS, DEFAULT_IGNORE, scan
from importscan.errors import ImportScanError
from importscan.matcher import find_target_importers
from importscan.reporter import LoggingReporter


DEFAULT_CONCURRENCY = 4

FORMATTERS = {
    "text": to_text,
    "json": to_json,
    "yaml": to_yaml,
    "mermaid": to_mermaid,
}


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="whoimportme",
        description="Find the files that import a file or directory.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  whoimportme src/main.ts .                           # Who imports src/main.ts?
  whoimportme --json --extensions=.ts,.tsx src/index.ts ./src
  whoimportme src/components .                        # Group by imported file
  whoimportme src/utils.ts . -f mermaid -o graph.mmd  # Mermaid output to file
        """,
    )

    # Positional arguments
    parser.add_argument(
        "target",
        help="The file or directory to search for imports of",
    )

    parser.add_argument(
        "root",
        help="The root directory to scan",
    )

    # Output options
    parser.add_argument(
        "-f", "--format",
        choices=sorted(FORMATTERS),
        default="text",
        help="Output format (default: text)",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results in JSON format (same as --format json)",
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )

    # Scanning options
    parser.add_argument(
        "--extensions",
        type=_split_list,
        default=list(DEFAULT_EXTENSIONS),
        help=f"Comma-separated list of file extensions to scan (default: {','.join(DEFAULT_EXTENSIONS)})",
    )

    parser.add_argument(
        "--ignore",
        type=_split_list,
        default=list(DEFAULT_IGNORE),
        help=f"Comma-separated glob patterns to ignore (default: {','.join(DEFAULT_IGNORE)})",
    )

    parser.add_argument(
        "--follow-symlinks",
        action="store_true",
        help="Follow symbolic links to directories",
    )

    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum directory depth to scan",
    )

    parser.add_argument(
        "--concurrency",
        type=int,
        default=DEFAULT_CONCURRENCY,
        help=f"Number of files processed in parallel (default: {DEFAULT_CONCURRENCY})",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug information to stderr",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parsed = parser.parse_args(args)

    parsed.extensions = [ext if ext.startswith(".") else "." + ext for ext in parsed.extensions]
    if parsed.json:
        parsed.format = "json"

    return parsed


def _validate(parsed) -> Optional[str]:
    """Return an error message for invalid option values, or None."""
    if parsed.max_depth is not None and parsed.max_depth < 0:
        return "--max-depth must be a non-negative integer"
    if parsed.concurrency <= 0:
        return "--concurrency must be a positive integer"

    root = Path(parsed.root)
    if not root.exists():
        return f"root directory '{parsed.root}' not found"
    if not root.is_dir():
        return f"root '{parsed.root}' is not a directory"
    return None


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    error = _validate(parsed)
    if error:
        print(f"Error: {error}", file=sys.stderr)
        return 1

    try:
        files = scan(
            Path(parsed.root),
            include_ext=parsed.extensions,
            ignore=parsed.ignore,
            follow_symlinks=parsed.follow_symlinks,
            max_depth=parsed.max_depth,
        )
        result = find_target_importers(
            parsed.target,
            files,
            parsed.root,
            reporter=LoggingReporter(),
            concurrency=parsed.concurrency,
        )
    except ImportScanError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output = FORMATTERS[parsed.format](result)

    # Write output
    if parsed.output:
        try:
            output_path = Path(parsed.output)
            output_path.write_text(output, encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
