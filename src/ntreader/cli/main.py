#!/usr/bin/env python3
"""
NTREADER CLI
------------
Command-line front end:
1. parse  - print one document as JSON or YAML
2. check  - validate a file or a whole directory tree

Author: ntreader contributors
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from ntreader.cli.formatter import NtFormatter, console
from ntreader.core.engine import ParseEngine, parse_path
from ntreader.core.errors import FormatError
from ntreader.core.models import DEFAULT_MAX_DEPTH, ParseOptions, max_depth_ceiling
from ntreader.parsing.exporter import to_json, to_yaml

VERSION = "ntreader v0.1.0"


def _max_depth(value: str) -> int:
    """argparse type for --max-depth: rejected at the command line, not mid-parse."""
    depth = int(value)
    ceiling = max_depth_ceiling()
    if not 1 <= depth <= ceiling:
        raise argparse.ArgumentTypeError(f"must be between 1 and {ceiling}, got {depth}")
    return depth


class NtReaderCLI:
    """
    CLI wrapper that translates user commands into engine calls.
    Each run() returns the process exit status.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="ntreader",
            description="ntreader - NestedText (minimal dialect) reader and checker",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = NtFormatter()
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags and subcommands."""
        self.parser.add_argument("--version", action="version", version=VERSION)
        self.parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        parse_parser = subparsers.add_parser("parse", help="Print a document as JSON or YAML")
        parse_parser.add_argument("path", help="Path to a NestedText file")
        parse_parser.add_argument("--format", choices=["json", "yaml"], default="json",
                                  help="Output rendering (default: json)")
        parse_parser.add_argument("--max-depth", type=_max_depth, default=DEFAULT_MAX_DEPTH,
                                  help=f"Maximum nesting depth (default: {DEFAULT_MAX_DEPTH})")

        check_parser = subparsers.add_parser("check", help="Validate files without printing them")
        check_parser.add_argument("path", help="Path to a file or directory")
        check_parser.add_argument("--ext", default=".nt", help="File extension filter (default: .nt)")
        check_parser.add_argument("--max-depth", type=_max_depth, default=DEFAULT_MAX_DEPTH,
                                  help=f"Maximum nesting depth (default: {DEFAULT_MAX_DEPTH})")

    def _run_parse(self, args: argparse.Namespace) -> int:
        path = Path(args.path)
        if not path.is_file():
            console.print(f"[bold red]Error:[/bold red] File '{args.path}' not found.")
            return 2

        try:
            tree = parse_path(path, ParseOptions(max_depth=args.max_depth))
        except FormatError as e:
            self.formatter.show_error(e, path.name)
            return 1
        except (OSError, UnicodeDecodeError) as e:
            console.print(f"[bold red]Error:[/bold red] Cannot read '{args.path}': {escape(str(e))}")
            return 2

        if args.format == "yaml":
            self.formatter.show_tree(to_yaml(tree), "yaml")
        else:
            self.formatter.show_tree(to_json(tree), "json")
        return 0

    def _run_check(self, args: argparse.Namespace) -> int:
        input_path = Path(args.path).resolve()
        if not input_path.exists():
            console.print(f"[bold red]Error:[/bold red] Path '{args.path}' not found.")
            return 2

        workspace = input_path if input_path.is_dir() else input_path.parent
        engine = ParseEngine(workspace, ParseOptions(max_depth=args.max_depth))

        if input_path.is_file():
            reports = [engine.check_file(input_path.name)]
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(bar_width=40),
                TaskProgressColumn(),
                TimeElapsedColumn(),
                console=console
            ) as progress:
                task_id = progress.add_task("Checking documents...", total=None)

                def on_progress(done: int, total: int):
                    progress.update(task_id, completed=done, total=total)

                reports = engine.scan_directory(extension=args.ext, progress_callback=on_progress)

        if not reports:
            console.print(f"\n[bold yellow]No '{args.ext}' files found.[/bold yellow]")
            return 0

        self.formatter.print_final_table(reports)
        self.formatter.print_summary(engine.generate_summary(reports))
        return 0 if all(r.get("success") for r in reports) else 1

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point."""
        args = self.parser.parse_args(argv)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

        if args.command == "parse":
            return self._run_parse(args)
        if args.command == "check":
            return self._run_check(args)
        self.parser.print_help()
        return 0


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(NtReaderCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
